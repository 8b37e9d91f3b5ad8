from django.contrib import admin
from apps.procurement.models import MaterialRequest, PurchaseOrder, GoodsReceipt, Bill
from apps.procurement.services import handle_bill_upload


class PurchaseOrderInline(admin.TabularInline):
    """Inline admin for purchase orders raised on a material request."""
    model = PurchaseOrder
    extra = 0
    fields = ['vendor', 'gst_type', 'status', 'created_by', 'created_at']
    readonly_fields = fields
    can_delete = False
    show_change_link = True


class GoodsReceiptInline(admin.TabularInline):
    model = GoodsReceipt
    extra = 0
    fields = ['status', 'verified_by', 'created_at']
    readonly_fields = fields
    can_delete = False
    show_change_link = True


@admin.register(MaterialRequest)
class MaterialRequestAdmin(admin.ModelAdmin):
    """Admin interface for material requests."""

    list_display = [
        'id',
        'project',
        'status',
        'requested_by',
        'engineer_approved',
        'owner_approved',
        'created_at'
    ]
    list_filter = ['status', 'engineer_approved', 'owner_approved', 'created_at']
    search_fields = ['project__name', 'requested_by__email']
    readonly_fields = [
        'id',
        'status',
        'engineer_approved',
        'engineer_approved_by',
        'engineer_approved_at',
        'owner_approved',
        'owner_approved_by',
        'owner_approved_at',
        'created_at',
        'updated_at'
    ]
    inlines = [PurchaseOrderInline]


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'project', 'vendor', 'gst_type', 'status', 'created_by', 'created_at']
    list_filter = ['status', 'gst_type', 'created_at']
    search_fields = ['vendor', 'project__name']
    readonly_fields = ['id', 'material_request', 'status', 'created_by', 'created_at']
    inlines = [GoodsReceiptInline]


@admin.register(GoodsReceipt)
class GoodsReceiptAdmin(admin.ModelAdmin):
    list_display = ['id', 'project', 'purchase_order', 'status', 'verified_by', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['project__name', 'purchase_order__vendor']
    readonly_fields = ['id', 'purchase_order', 'status', 'verified_by', 'created_at']


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    """Admin interface for bills. Amounts are computed, never edited here."""

    list_display = [
        'id',
        'project',
        'vendor_gstin',
        'taxable_amount',
        'total_amount',
        'source',
        'status',
        'created_at'
    ]
    list_filter = ['status', 'source', 'created_at']
    search_fields = ['vendor_gstin', 'project__name', 'purchase_order__vendor']
    readonly_fields = [
        'id',
        'purchase_order',
        'goods_receipt',
        'gst_rate',
        'taxable_amount',
        'cgst',
        'sgst',
        'igst',
        'total_amount',
        'status',
        'approved_by',
        'approved_at',
        'ocr_data',
        'upload_path',
        'ocr_processed_at',
        'created_at',
        'updated_at'
    ]

    fieldsets = (
        ('Bill', {
            'fields': ('id', 'project', 'purchase_order', 'goods_receipt', 'source', 'status')
        }),
        ('Vendor', {
            'fields': ('vendor_gstin', 'vendor_state_code', 'project_state_code')
        }),
        ('Amounts', {
            'fields': ('gst_rate', 'taxable_amount', 'cgst', 'sgst', 'igst', 'total_amount')
        }),
        ('Approval', {
            'fields': ('approved_by', 'approved_at', 'pdf_url')
        }),
        ('OCR', {
            'fields': ('upload_path', 'ocr_data', 'ocr_processed_at'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    actions = ['rerun_ocr']

    @admin.action(description='Re-run OCR on uploaded file')
    def rerun_ocr(self, request, queryset):
        merged = 0
        for bill in queryset.exclude(upload_path=''):
            if handle_bill_upload(bill.upload_path) is not None:
                merged += 1
        self.message_user(request, f'{merged} bill(s) re-processed.')
