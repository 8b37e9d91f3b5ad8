"""
Bill service.

Bills are raised against a confirmed goods receipt and carry the GST
split computed by calculate_gst(). The engineer approval is the only
status transition.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.procurement.models import (
    Bill,
    BillSource,
    BillStatus,
    GoodsReceipt,
    GoodsReceiptStatus,
    PurchaseOrder,
)
from apps.projects.services import (
    check_scope,
    REQUESTER_ROLES,
    ENGINEER_ROLES,
    NotFoundError,
    PreconditionFailedError,
)

from .tax import calculate_gst, to_decimal

logger = logging.getLogger(__name__)


def _check_column_precision(values: dict) -> None:
    """Refuse figures that would overflow the bill's decimal columns."""
    for name, value in values.items():
        field = Bill._meta.get_field(name)
        limit = Decimal(10) ** (field.max_digits - field.decimal_places)
        if abs(value) >= limit:
            raise PreconditionFailedError(
                f"{name} {value} exceeds the largest supported value"
            )


@transaction.atomic
def create_bill(
    *,
    project_id: UUID,
    po_id: UUID,
    grn_id: UUID,
    user: User,
    taxable_amount: Decimal,
    gst_rate: Decimal,
    vendor_gstin: str = '',
    vendor_state_code: str = '',
    project_state_code: str = '',
    source: str = BillSource.MANUAL,
    pdf_url: Optional[str] = None
) -> Bill:
    """
    Create a bill against a confirmed GRN.

    The project state code falls back to the project's own code when the
    caller leaves it blank. The purchase order's status is not checked.

    Args:
        project_id: UUID of the acting project
        po_id: UUID of the purchase order
        grn_id: UUID of the goods receipt
        user: Manager or field manager creating the bill
        taxable_amount: Base amount before GST
        gst_rate: GST rate in percent
        vendor_gstin: Vendor's GSTIN
        vendor_state_code: Vendor's GST state code
        project_state_code: Site's GST state code
        source: MANUAL or OCR
        pdf_url: Optional link to an existing bill document

    Returns:
        Created Bill in BILL_GENERATED status

    Raises:
        ProjectNotFoundError: If project doesn't exist
        NotFoundError: If the PO or GRN doesn't exist
        PreconditionFailedError: If access is denied, a record belongs to
            another project, the GRN is not GRN_CONFIRMED, or the GRN
            was not received against the given PO, or an amount is too
            large for the bill columns
    """
    scope = check_scope(project_id=project_id, user=user, allowed_roles=REQUESTER_ROLES)

    if source not in BillSource.values:
        raise PreconditionFailedError(f"Unknown bill source {source}")

    try:
        po = PurchaseOrder.objects.get(id=po_id)
    except (PurchaseOrder.DoesNotExist, ValidationError):
        raise NotFoundError(f"Purchase order {po_id} not found")

    try:
        grn = GoodsReceipt.objects.get(id=grn_id)
    except (GoodsReceipt.DoesNotExist, ValidationError):
        raise NotFoundError(f"GRN {grn_id} not found")

    if po.project_id != scope.project_id:
        raise PreconditionFailedError("PO does not belong to this project")
    if grn.project_id != scope.project_id:
        raise PreconditionFailedError("GRN does not belong to this project")

    if grn.status != GoodsReceiptStatus.GRN_CONFIRMED:
        raise PreconditionFailedError("GRN must be GRN_CONFIRMED")

    if grn.purchase_order_id != po.id:
        raise PreconditionFailedError("GRN was not received against this PO")

    project_state_code = (project_state_code or '').strip() or scope.project.state_code
    vendor_state_code = (vendor_state_code or '').strip()

    try:
        breakdown = calculate_gst(
            taxable_amount,
            gst_rate,
            vendor_state_code=vendor_state_code,
            project_state_code=project_state_code,
        )
    except ValueError as e:
        raise PreconditionFailedError(str(e))

    _check_column_precision({'gst_rate': to_decimal(gst_rate), **breakdown.as_dict()})

    bill = Bill.objects.create(
        project=scope.project,
        purchase_order=po,
        goods_receipt=grn,
        source=source,
        vendor_gstin=vendor_gstin or '',
        gst_rate=gst_rate,
        vendor_state_code=vendor_state_code,
        project_state_code=project_state_code,
        pdf_url=pdf_url or '',
        status=BillStatus.BILL_GENERATED,
        created_by=scope.user,
        **breakdown.as_dict()
    )

    logger.info(
        "Bill %s created for GRN %s (total %s, %s) by %s (%s)",
        bill.id,
        grn.id,
        bill.total_amount,
        'IGST' if breakdown.is_inter_state else 'CGST+SGST',
        user.id,
        scope.role,
    )
    return bill


@transaction.atomic
def approve_bill(*, bill_id: UUID, user: User) -> Bill:
    """
    Engineer approval: BILL_GENERATED -> BILL_APPROVED.

    Raises:
        NotFoundError: If the bill doesn't exist
        PreconditionFailedError: If access is denied or the bill is not BILL_GENERATED
    """
    try:
        bill = Bill.objects.select_for_update().get(id=bill_id)
    except (Bill.DoesNotExist, ValidationError):
        raise NotFoundError(f"Bill {bill_id} not found")

    scope = check_scope(project_id=bill.project_id, user=user, allowed_roles=ENGINEER_ROLES)

    if bill.status != BillStatus.BILL_GENERATED:
        raise PreconditionFailedError("Bill must be BILL_GENERATED")

    bill.status = BillStatus.BILL_APPROVED
    bill.approved_by = scope.user
    bill.approved_at = timezone.now()
    bill.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])

    logger.info("Bill %s approved by %s (%s)", bill.id, user.id, scope.role)
    return bill
