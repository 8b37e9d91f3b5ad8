from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from .models import (
    MaterialRequest,
    PurchaseOrder,
    GoodsReceipt,
    Bill,
    BillSource,
    GSTType,
)
from apps.accounts.serializers import UserMinimalSerializer


# =============================================================================
# OUTPUT SERIALIZERS
# =============================================================================

class MaterialRequestSerializer(serializers.ModelSerializer):
    """Material request with its approval trail."""

    requested_by = UserMinimalSerializer(read_only=True)
    engineer_approved_by = UserMinimalSerializer(read_only=True)
    owner_approved_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = MaterialRequest
        fields = [
            'id',
            'project',
            'materials',
            'status',
            'requested_by',
            'engineer_approved',
            'engineer_approved_by',
            'engineer_approved_at',
            'owner_approved',
            'owner_approved_by',
            'owner_approved_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PurchaseOrderSerializer(serializers.ModelSerializer):
    created_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            'id',
            'project',
            'material_request',
            'vendor',
            'rate_details',
            'gst_type',
            'status',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


class GoodsReceiptSerializer(serializers.ModelSerializer):
    verified_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = GoodsReceipt
        fields = [
            'id',
            'project',
            'purchase_order',
            'received_qty',
            'status',
            'verified_by',
            'created_at',
        ]
        read_only_fields = fields


class BillSerializer(serializers.ModelSerializer):
    """Bill with GST split. Monetary fields render as two-decimal strings."""

    created_by = UserMinimalSerializer(read_only=True)
    approved_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Bill
        fields = [
            'id',
            'project',
            'purchase_order',
            'goods_receipt',
            'source',
            'vendor_gstin',
            'gst_rate',
            'vendor_state_code',
            'project_state_code',
            'taxable_amount',
            'cgst',
            'sgst',
            'igst',
            'total_amount',
            'pdf_url',
            'status',
            'created_by',
            'approved_by',
            'approved_at',
            'ocr_data',
            'upload_path',
            'ocr_processed_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


# =============================================================================
# INPUT SERIALIZERS
# =============================================================================

class MaterialLineSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))
    unit = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')


class MaterialRequestCreateSerializer(serializers.Serializer):
    """Serializer for raising a material request."""

    project_id = serializers.UUIDField()
    materials = MaterialLineSerializer(many=True, allow_empty=False)

    def validate_materials(self, value):
        # JSON storage; keep quantities as strings to avoid float drift
        return [
            {**line, 'quantity': str(line['quantity'])}
            for line in value
        ]


class PurchaseOrderCreateSerializer(serializers.Serializer):
    """Serializer for issuing a purchase order."""

    project_id = serializers.UUIDField()
    mr_id = serializers.UUIDField()
    vendor = serializers.CharField(max_length=200)
    rate_details = serializers.ListField(child=serializers.DictField(), allow_empty=True, default=list)
    gst_type = serializers.ChoiceField(choices=GSTType.choices)


class GoodsReceiptCreateSerializer(serializers.Serializer):
    """Serializer for confirming a goods receipt."""

    project_id = serializers.UUIDField()
    po_id = serializers.UUIDField()
    received_qty = serializers.ListField(child=serializers.DictField(), allow_empty=False)


class BillCreateSerializer(serializers.Serializer):
    """Serializer for creating a bill."""

    project_id = serializers.UUIDField()
    po_id = serializers.UUIDField()
    grn_id = serializers.UUIDField()
    source = serializers.ChoiceField(choices=BillSource.choices, default=BillSource.MANUAL)
    vendor_gstin = serializers.CharField(max_length=15, required=False, allow_blank=True, default='')
    # Total at the highest rate must still fit the bill's 14-digit amount columns
    taxable_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    gst_rate = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal('0'),
        max_value=Decimal('100')
    )
    vendor_state_code = serializers.CharField(max_length=2, required=False, allow_blank=True, default='')
    project_state_code = serializers.CharField(max_length=2, required=False, allow_blank=True, default='')
    pdf_url = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class BillUploadSerializer(serializers.Serializer):
    """Serializer for uploading a scanned bill file."""

    project_id = serializers.UUIDField()
    bill_id = serializers.UUIDField()
    file = serializers.FileField()

    def validate_file(self, value):
        extension = value.name.rsplit('.', 1)[-1].lower() if '.' in value.name else ''
        allowed = getattr(settings, 'PROCUREMENT_BILL_UPLOAD_EXTENSIONS', ['pdf', 'jpg', 'jpeg', 'png'])
        if extension not in allowed:
            raise serializers.ValidationError(
                f"Unsupported file type. Allowed: {', '.join(allowed)}"
            )
        return value


class BillUploadResponseSerializer(serializers.Serializer):
    path = serializers.CharField()
    bill = BillSerializer(allow_null=True)


class CreatedSerializer(serializers.Serializer):
    id = serializers.UUIDField()


class TransitionSerializer(serializers.Serializer):
    ok = serializers.BooleanField()


class BillPdfSerializer(serializers.Serializer):
    pdf_url = serializers.CharField()
