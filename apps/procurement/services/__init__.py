from .tax import GSTBreakdown, calculate_gst, is_inter_state, round_money
from .material_requests import (
    create_material_request,
    engineer_approve_material_request,
    owner_approve_material_request,
)
from .purchase_orders import create_purchase_order, confirm_goods_receipt
from .bills import create_bill, approve_bill
from .bill_documents import generate_bill_pdf, render_bill_pdf
from .bill_uploads import store_bill_upload
from .ocr_ingestion import (
    InvalidUploadPathError,
    BillUploadPath,
    build_upload_path,
    parse_bill_upload_path,
    handle_bill_upload,
)

__all__ = [
    'GSTBreakdown',
    'calculate_gst',
    'is_inter_state',
    'round_money',
    'create_material_request',
    'engineer_approve_material_request',
    'owner_approve_material_request',
    'create_purchase_order',
    'confirm_goods_receipt',
    'create_bill',
    'approve_bill',
    'generate_bill_pdf',
    'render_bill_pdf',
    'store_bill_upload',
    'InvalidUploadPathError',
    'BillUploadPath',
    'build_upload_path',
    'parse_bill_upload_path',
    'handle_bill_upload',
]
