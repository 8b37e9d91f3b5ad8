"""
Purchase order and goods receipt services.

A purchase order can only be raised against an OWNER_APPROVED material
request of the same project; a goods receipt only against a PO_CREATED
purchase order of the same project.
"""

import logging
from typing import List
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.models import User
from apps.procurement.models import (
    MaterialRequest,
    MaterialRequestStatus,
    PurchaseOrder,
    PurchaseOrderStatus,
    GoodsReceipt,
    GoodsReceiptStatus,
    GSTType,
)
from apps.projects.services import (
    check_scope,
    PURCHASER_ROLES,
    REQUESTER_ROLES,
    NotFoundError,
    PreconditionFailedError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def create_purchase_order(
    *,
    project_id: UUID,
    mr_id: UUID,
    user: User,
    vendor: str,
    rate_details: List[dict],
    gst_type: str
) -> PurchaseOrder:
    """
    Issue a purchase order against an owner-approved material request.

    Args:
        project_id: UUID of the acting project
        mr_id: UUID of the material request
        user: Purchase manager issuing the order
        vendor: Vendor name
        rate_details: Agreed rates, one dict per line
        gst_type: GST regime tag (CGST_SGST or IGST)

    Returns:
        Created PurchaseOrder in PO_CREATED status

    Raises:
        ProjectNotFoundError: If project doesn't exist
        NotFoundError: If the material request doesn't exist
        PreconditionFailedError: If access is denied, the request belongs to
            another project, or it is not OWNER_APPROVED
    """
    scope = check_scope(project_id=project_id, user=user, allowed_roles=PURCHASER_ROLES)

    if gst_type not in GSTType.values:
        raise PreconditionFailedError(f"Unknown GST type {gst_type}")

    try:
        mr = MaterialRequest.objects.select_for_update().get(id=mr_id)
    except (MaterialRequest.DoesNotExist, ValidationError):
        raise NotFoundError(f"Material request {mr_id} not found")

    # Cross-project linkage is rejected before any status check
    if mr.project_id != scope.project_id:
        raise PreconditionFailedError("MR does not belong to this project")

    if mr.status != MaterialRequestStatus.OWNER_APPROVED:
        raise PreconditionFailedError("MR must be OWNER_APPROVED")

    po = PurchaseOrder.objects.create(
        project=scope.project,
        material_request=mr,
        vendor=vendor,
        rate_details=list(rate_details),
        gst_type=gst_type,
        status=PurchaseOrderStatus.PO_CREATED,
        created_by=scope.user,
    )

    logger.info(
        "Purchase order %s created for MR %s on project %s by %s",
        po.id, mr.id, scope.project_id, user.id,
    )
    return po


@transaction.atomic
def confirm_goods_receipt(
    *,
    project_id: UUID,
    po_id: UUID,
    user: User,
    received_qty: List[dict]
) -> GoodsReceipt:
    """
    Confirm physical receipt of goods against a purchase order.

    Several receipts may be confirmed against the same order (partial
    deliveries); the order itself stays PO_CREATED.

    Raises:
        ProjectNotFoundError: If project doesn't exist
        NotFoundError: If the purchase order doesn't exist
        PreconditionFailedError: If access is denied, the order belongs to
            another project, or it is not PO_CREATED
    """
    scope = check_scope(project_id=project_id, user=user, allowed_roles=REQUESTER_ROLES)

    try:
        po = PurchaseOrder.objects.get(id=po_id)
    except (PurchaseOrder.DoesNotExist, ValidationError):
        raise NotFoundError(f"Purchase order {po_id} not found")

    if po.project_id != scope.project_id:
        raise PreconditionFailedError("PO does not belong to this project")

    if po.status != PurchaseOrderStatus.PO_CREATED:
        raise PreconditionFailedError("PO must be PO_CREATED")

    grn = GoodsReceipt.objects.create(
        project=scope.project,
        purchase_order=po,
        received_qty=list(received_qty),
        status=GoodsReceiptStatus.GRN_CONFIRMED,
        verified_by=scope.user,
    )

    logger.info("GRN %s confirmed for PO %s by %s (%s)", grn.id, po.id, user.id, scope.role)
    return grn
