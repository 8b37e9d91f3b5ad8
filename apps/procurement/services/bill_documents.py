"""
Bill PDF rendering.

One-page A4 summary of a bill, stored in default_storage under
``{PROCUREMENT_BILL_PDF_PREFIX}/{project_id}/{bill_id}.pdf``.
"""

import io
import logging
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db import transaction
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from apps.accounts.models import User
from apps.procurement.models import Bill
from apps.projects.services import check_scope, BILL_VIEWER_ROLES, NotFoundError

logger = logging.getLogger(__name__)


def get_pdf_name(bill: Bill) -> str:
    prefix = getattr(settings, 'PROCUREMENT_BILL_PDF_PREFIX', 'bill_pdfs').strip('/')
    return f"{prefix}/{bill.project_id}/{bill.id}.pdf"


def render_bill_pdf(bill: Bill) -> bytes:
    """Render ``bill`` to PDF bytes."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=f"Bill {bill.id}",
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
    )
    styles = getSampleStyleSheet()

    elements = [
        Paragraph("Tax Invoice", styles['Title']),
        Paragraph(f"Project: {bill.project.name}", styles['Normal']),
        Paragraph(f"Bill: {bill.id}", styles['Normal']),
        Paragraph(f"Vendor: {bill.purchase_order.vendor}", styles['Normal']),
        Paragraph(f"Vendor GSTIN: {bill.vendor_gstin or '-'}", styles['Normal']),
        Paragraph(f"Status: {bill.get_status_display()}", styles['Normal']),
        Spacer(1, 0.3 * inch),
    ]

    rows = [
        ['', 'Amount (INR)'],
        ['Taxable amount', f"{bill.taxable_amount:.2f}"],
        ['GST rate', f"{bill.gst_rate}%"],
        ['CGST', f"{bill.cgst:.2f}"],
        ['SGST', f"{bill.sgst:.2f}"],
        ['IGST', f"{bill.igst:.2f}"],
        ['Total', f"{bill.total_amount:.2f}"],
    ]
    table = Table(rows, colWidths=[3 * inch, 2 * inch])
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#366092')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    elements.append(table)

    doc.build(elements)
    return buffer.getvalue()


@transaction.atomic
def generate_bill_pdf(*, bill_id: UUID, user: User) -> str:
    """
    Render a bill's PDF, store it and record its URL on the bill.

    A previous rendition is replaced.

    Returns:
        Public URL of the stored PDF

    Raises:
        NotFoundError: If the bill doesn't exist
        PreconditionFailedError: If access is denied
    """
    try:
        bill = (
            Bill.objects
            .select_for_update()
            .select_related('project', 'purchase_order')
            .get(id=bill_id)
        )
    except (Bill.DoesNotExist, ValidationError):
        raise NotFoundError(f"Bill {bill_id} not found")

    scope = check_scope(project_id=bill.project_id, user=user, allowed_roles=BILL_VIEWER_ROLES)

    name = get_pdf_name(bill)
    content = render_bill_pdf(bill)

    if default_storage.exists(name):
        default_storage.delete(name)
    saved_name = default_storage.save(name, ContentFile(content))

    bill.pdf_url = default_storage.url(saved_name)
    bill.save(update_fields=['pdf_url', 'updated_at'])

    logger.info("Generated PDF %s for bill %s by %s (%s)", saved_name, bill.id, user.id, scope.role)
    return bill.pdf_url
