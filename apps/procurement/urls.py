from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'procurement'

router = DefaultRouter()
router.register(r'material-requests', views.MaterialRequestViewSet, basename='material-request')
router.register(r'purchase-orders', views.PurchaseOrderViewSet, basename='purchase-order')
router.register(r'goods-receipts', views.GoodsReceiptViewSet, basename='goods-receipt')
router.register(r'bills', views.BillViewSet, basename='bill')

urlpatterns = [
    # GET    /api/procurement/material-requests/                        - List material requests
    # POST   /api/procurement/material-requests/                        - Raise material request
    # GET    /api/procurement/material-requests/{id}/                   - Get material request
    # POST   /api/procurement/material-requests/{id}/engineer-approve/  - Engineer approval
    # POST   /api/procurement/material-requests/{id}/owner-approve/     - Owner approval
    # GET    /api/procurement/purchase-orders/                          - List purchase orders
    # POST   /api/procurement/purchase-orders/                          - Issue purchase order
    # GET    /api/procurement/goods-receipts/                           - List goods receipts
    # POST   /api/procurement/goods-receipts/                           - Confirm goods receipt
    # GET    /api/procurement/bills/                                    - List bills
    # POST   /api/procurement/bills/                                    - Create bill
    # POST   /api/procurement/bills/upload/                             - Upload scanned bill
    # POST   /api/procurement/bills/{id}/approve/                       - Engineer approval
    # POST   /api/procurement/bills/{id}/generate-pdf/                  - Render bill PDF
    path('', include(router.urls)),
]
