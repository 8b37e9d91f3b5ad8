from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class MaterialRequestStatus(models.TextChoices):
    REQUESTED = 'REQUESTED', 'Requested'
    ENGINEER_APPROVED = 'ENGINEER_APPROVED', 'Engineer approved'
    OWNER_APPROVED = 'OWNER_APPROVED', 'Owner approved'


class PurchaseOrderStatus(models.TextChoices):
    PO_CREATED = 'PO_CREATED', 'PO created'


class GoodsReceiptStatus(models.TextChoices):
    GRN_CONFIRMED = 'GRN_CONFIRMED', 'GRN confirmed'


class BillStatus(models.TextChoices):
    BILL_GENERATED = 'BILL_GENERATED', 'Bill generated'
    BILL_APPROVED = 'BILL_APPROVED', 'Bill approved'


class BillSource(models.TextChoices):
    MANUAL = 'MANUAL', 'Manual entry'
    OCR = 'OCR', 'OCR extraction'


class GSTType(models.TextChoices):
    CGST_SGST = 'CGST_SGST', 'Intra-state (CGST + SGST)'
    IGST = 'IGST', 'Inter-state (IGST)'


class MaterialRequest(models.Model):
    """Site request for materials, approved by engineer then owner."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.PROTECT,
        related_name='material_requests'
    )

    # [{"name": "Cement", "quantity": 50, "unit": "bag"}, ...]
    materials = models.JSONField(default=list)

    status = models.CharField(
        max_length=32,
        choices=MaterialRequestStatus.choices,
        default=MaterialRequestStatus.REQUESTED
    )

    requested_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='material_requests'
    )

    # Approval trail
    engineer_approved = models.BooleanField(default=False)
    engineer_approved_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='engineer_approved_requests'
    )
    engineer_approved_at = models.DateTimeField(null=True, blank=True)
    owner_approved = models.BooleanField(default=False)
    owner_approved_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='owner_approved_requests'
    )
    owner_approved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'material_requests'
        indexes = [
            models.Index(fields=['project', 'status'], name='mr_project_status_idx'),
            models.Index(fields=['created_at'], name='mr_created_at_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"MR {str(self.id)[:8]} ({self.status})"


class PurchaseOrder(models.Model):
    """Purchase order issued against an owner-approved material request."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.PROTECT,
        related_name='purchase_orders'
    )
    material_request = models.ForeignKey(
        MaterialRequest,
        on_delete=models.PROTECT,
        related_name='purchase_orders'
    )

    vendor = models.CharField(max_length=200)
    # [{"item": "Cement", "rate": "380.00", "unit": "bag"}, ...]
    rate_details = models.JSONField(default=list)
    gst_type = models.CharField(max_length=16, choices=GSTType.choices)

    status = models.CharField(
        max_length=32,
        choices=PurchaseOrderStatus.choices,
        default=PurchaseOrderStatus.PO_CREATED
    )

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='purchase_orders_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'purchase_orders'
        indexes = [
            models.Index(fields=['project', 'status'], name='po_project_status_idx'),
            models.Index(fields=['material_request'], name='po_material_request_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"PO {str(self.id)[:8]} - {self.vendor}"


class GoodsReceipt(models.Model):
    """Goods receipt note confirming physical delivery against a PO."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.PROTECT,
        related_name='goods_receipts'
    )
    purchase_order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.PROTECT,
        related_name='goods_receipts'
    )

    # [{"item": "Cement", "quantity": 48}, ...]
    received_qty = models.JSONField(default=list)

    status = models.CharField(
        max_length=32,
        choices=GoodsReceiptStatus.choices,
        default=GoodsReceiptStatus.GRN_CONFIRMED
    )

    verified_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='goods_receipts_verified'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'goods_receipts'
        indexes = [
            models.Index(fields=['project', 'status'], name='grn_project_status_idx'),
            models.Index(fields=['purchase_order'], name='grn_purchase_order_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"GRN {str(self.id)[:8]} for PO {str(self.purchase_order_id)[:8]}"


class Bill(models.Model):
    """Vendor bill with GST split, raised against a confirmed GRN."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.PROTECT,
        related_name='bills'
    )
    purchase_order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.PROTECT,
        related_name='bills'
    )
    goods_receipt = models.ForeignKey(
        GoodsReceipt,
        on_delete=models.PROTECT,
        related_name='bills'
    )

    source = models.CharField(max_length=16, choices=BillSource.choices, default=BillSource.MANUAL)
    vendor_gstin = models.CharField(max_length=15, blank=True)

    # Tax inputs
    gst_rate = models.DecimalField(max_digits=5, decimal_places=2)
    vendor_state_code = models.CharField(max_length=2, blank=True)
    project_state_code = models.CharField(max_length=2, blank=True)

    # Monetary fields, always two decimals
    taxable_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    cgst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    sgst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    igst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)

    pdf_url = models.CharField(max_length=500, blank=True)

    status = models.CharField(
        max_length=32,
        choices=BillStatus.choices,
        default=BillStatus.BILL_GENERATED
    )

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='bills_created'
    )
    approved_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='bills_approved'
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    # OCR enrichment, merged asynchronously after upload
    ocr_data = models.JSONField(default=dict, blank=True)
    upload_path = models.CharField(max_length=300, blank=True)
    ocr_processed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bills'
        indexes = [
            models.Index(fields=['project', 'status'], name='bill_project_status_idx'),
            models.Index(fields=['purchase_order'], name='bill_purchase_order_idx'),
            models.Index(fields=['goods_receipt'], name='bill_goods_receipt_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Bill {str(self.id)[:8]} - {self.total_amount} ({self.status})"

    @property
    def gst_amount(self):
        return self.cgst + self.sgst + self.igst
