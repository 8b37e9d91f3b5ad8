import uuid

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import MaterialRequest, PurchaseOrder, GoodsReceipt, Bill
from .serializers import (
    MaterialRequestSerializer,
    MaterialRequestCreateSerializer,
    PurchaseOrderSerializer,
    PurchaseOrderCreateSerializer,
    GoodsReceiptSerializer,
    GoodsReceiptCreateSerializer,
    BillSerializer,
    BillCreateSerializer,
    BillUploadSerializer,
    BillUploadResponseSerializer,
    BillPdfSerializer,
    CreatedSerializer,
    TransitionSerializer,
)

from apps.projects.models import Project
from apps.projects.permissions import IsProjectMember
from apps.projects.services import NotFoundError, PreconditionFailedError
from apps.procurement.services import (
    create_material_request,
    engineer_approve_material_request,
    owner_approve_material_request,
    create_purchase_order,
    confirm_goods_receipt,
    create_bill,
    approve_bill,
    generate_bill_pdf,
    store_bill_upload,
)


def workflow_error_response(error):
    """Translate a workflow exception into an error response."""
    if isinstance(error, NotFoundError):
        return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)
    return Response({'error': str(error)}, status=status.HTTP_400_BAD_REQUEST)


class ProcurementPagination(PageNumberPagination):
    """Custom pagination for procurement records."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


LIST_FILTERS = [
    OpenApiParameter('project', str, description='Filter by project UUID'),
    OpenApiParameter('status', str, description='Filter by status'),
]


class ProjectScopedViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Base viewset for records that belong to a project.

    Lists only records on projects where the user holds a member slot,
    optionally filtered by ``project`` and ``status`` query params.
    """

    permission_classes = [IsAuthenticated, IsProjectMember]
    pagination_class = ProcurementPagination
    model = None
    related = ()

    def get_queryset(self):
        projects = Project.objects.filter(Project.membership_filter(self.request.user))
        queryset = (
            self.model.objects
            .filter(project__in=projects)
            .select_related('project', *self.related)
        )

        project_id = self.request.query_params.get('project')
        if project_id:
            try:
                queryset = queryset.filter(project_id=uuid.UUID(project_id))
            except ValueError:
                return queryset.none()

        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        return queryset

    @extend_schema(parameters=LIST_FILTERS)
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)


class MaterialRequestViewSet(ProjectScopedViewSet):
    """
    Material requests.

    list: Get material requests on the user's projects
    retrieve: Get a specific material request
    create: Raise a material request (manager, field manager)
    engineer_approve: Engineer approval
    owner_approve: Owner approval
    """

    model = MaterialRequest
    related = ('requested_by', 'engineer_approved_by', 'owner_approved_by')
    serializer_class = MaterialRequestSerializer

    @extend_schema(request=MaterialRequestCreateSerializer, responses={201: CreatedSerializer})
    def create(self, request, *args, **kwargs):
        """Raise a new material request."""
        serializer = MaterialRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            mr = create_material_request(
                project_id=serializer.validated_data['project_id'],
                user=request.user,
                materials=serializer.validated_data['materials'],
            )
        except (NotFoundError, PreconditionFailedError) as e:
            return workflow_error_response(e)

        return Response({'id': str(mr.id)}, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: TransitionSerializer})
    @action(detail=True, methods=['post'], url_path='engineer-approve')
    def engineer_approve(self, request, pk=None):
        """Approve a REQUESTED material request as engineer."""
        try:
            engineer_approve_material_request(mr_id=pk, user=request.user)
        except (NotFoundError, PreconditionFailedError) as e:
            return workflow_error_response(e)

        return Response({'ok': True})

    @extend_schema(request=None, responses={200: TransitionSerializer})
    @action(detail=True, methods=['post'], url_path='owner-approve')
    def owner_approve(self, request, pk=None):
        """Approve an ENGINEER_APPROVED material request as owner."""
        try:
            owner_approve_material_request(mr_id=pk, user=request.user)
        except (NotFoundError, PreconditionFailedError) as e:
            return workflow_error_response(e)

        return Response({'ok': True})


class PurchaseOrderViewSet(ProjectScopedViewSet):
    """
    Purchase orders.

    list: Get purchase orders on the user's projects
    retrieve: Get a specific purchase order
    create: Issue a purchase order (purchase manager)
    """

    model = PurchaseOrder
    related = ('material_request', 'created_by')
    serializer_class = PurchaseOrderSerializer

    @extend_schema(request=PurchaseOrderCreateSerializer, responses={201: CreatedSerializer})
    def create(self, request, *args, **kwargs):
        """Issue a purchase order against an owner-approved request."""
        serializer = PurchaseOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            po = create_purchase_order(
                project_id=data['project_id'],
                mr_id=data['mr_id'],
                user=request.user,
                vendor=data['vendor'],
                rate_details=data['rate_details'],
                gst_type=data['gst_type'],
            )
        except (NotFoundError, PreconditionFailedError) as e:
            return workflow_error_response(e)

        return Response({'id': str(po.id)}, status=status.HTTP_201_CREATED)


class GoodsReceiptViewSet(ProjectScopedViewSet):
    """
    Goods receipts.

    list: Get goods receipts on the user's projects
    retrieve: Get a specific goods receipt
    create: Confirm a goods receipt (manager, field manager)
    """

    model = GoodsReceipt
    related = ('purchase_order', 'verified_by')
    serializer_class = GoodsReceiptSerializer

    @extend_schema(request=GoodsReceiptCreateSerializer, responses={201: CreatedSerializer})
    def create(self, request, *args, **kwargs):
        """Confirm receipt of goods against a purchase order."""
        serializer = GoodsReceiptCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            grn = confirm_goods_receipt(
                project_id=data['project_id'],
                po_id=data['po_id'],
                user=request.user,
                received_qty=data['received_qty'],
            )
        except (NotFoundError, PreconditionFailedError) as e:
            return workflow_error_response(e)

        return Response({'id': str(grn.id)}, status=status.HTTP_201_CREATED)


class BillViewSet(ProjectScopedViewSet):
    """
    Bills.

    list: Get bills on the user's projects
    retrieve: Get a specific bill
    create: Create a bill against a confirmed GRN (manager, field manager)
    approve: Engineer approval
    generate_pdf: Render and store the bill PDF
    upload: Upload a scanned bill file for OCR
    """

    model = Bill
    related = ('purchase_order', 'goods_receipt', 'created_by', 'approved_by')
    serializer_class = BillSerializer

    @extend_schema(request=BillCreateSerializer, responses={201: BillSerializer})
    def create(self, request, *args, **kwargs):
        """Create a bill; the GST split is computed server-side."""
        serializer = BillCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            bill = create_bill(
                project_id=data['project_id'],
                po_id=data['po_id'],
                grn_id=data['grn_id'],
                user=request.user,
                source=data['source'],
                vendor_gstin=data['vendor_gstin'],
                taxable_amount=data['taxable_amount'],
                gst_rate=data['gst_rate'],
                vendor_state_code=data['vendor_state_code'],
                project_state_code=data['project_state_code'],
                pdf_url=data.get('pdf_url'),
            )
        except (NotFoundError, PreconditionFailedError) as e:
            return workflow_error_response(e)

        output_serializer = BillSerializer(bill, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: TransitionSerializer})
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        """Approve a generated bill as engineer."""
        try:
            approve_bill(bill_id=pk, user=request.user)
        except (NotFoundError, PreconditionFailedError) as e:
            return workflow_error_response(e)

        return Response({'ok': True})

    @extend_schema(request=None, responses={200: BillPdfSerializer})
    @action(detail=True, methods=['post'], url_path='generate-pdf')
    def generate_pdf(self, request, pk=None):
        """Render the bill PDF and return its URL."""
        try:
            pdf_url = generate_bill_pdf(bill_id=pk, user=request.user)
        except (NotFoundError, PreconditionFailedError) as e:
            return workflow_error_response(e)

        return Response({'pdf_url': pdf_url})

    @extend_schema(request=BillUploadSerializer, responses={201: BillUploadResponseSerializer})
    @action(detail=False, methods=['post'], parser_classes=[MultiPartParser, FormParser])
    def upload(self, request):
        """Upload a scanned bill; OCR data is merged into the bill."""
        serializer = BillUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            path = store_bill_upload(
                project_id=data['project_id'],
                bill_id=data['bill_id'],
                user=request.user,
                uploaded_file=data['file'],
            )
        except (NotFoundError, PreconditionFailedError) as e:
            return workflow_error_response(e)

        bill = Bill.objects.filter(id=data['bill_id']).first()
        output_serializer = BillSerializer(bill, context={'request': request}) if bill else None
        return Response({
            'path': path,
            'bill': output_serializer.data if output_serializer else None,
        }, status=status.HTTP_201_CREATED)
