import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.projects.models import Project
from apps.procurement.models import GSTType
from apps.procurement.services import (
    create_material_request,
    engineer_approve_material_request,
    owner_approve_material_request,
    create_purchase_order,
    confirm_goods_receipt,
    create_bill,
)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def make_user(db):
    """Factory for users with a given role."""
    def _make_user(email, role=''):
        return User.objects.create_user(
            email=email,
            password='TestPass123!',
            display_name=email.split('@')[0].title(),
            role=role,
        )
    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user('owner@example.com', UserRole.OWNER)


@pytest.fixture
def engineer(make_user):
    return make_user('engineer@example.com', UserRole.ENGINEER)


@pytest.fixture
def manager(make_user):
    return make_user('manager@example.com', UserRole.MANAGER)


@pytest.fixture
def purchaser(make_user):
    return make_user('purchaser@example.com', UserRole.PURCHASE_MANAGER)


@pytest.fixture
def outsider(make_user):
    """A manager who holds no slot on any test project."""
    return make_user('outsider@example.com', UserRole.MANAGER)


@pytest.fixture
def project(db, owner, engineer, manager, purchaser):
    """Active project in state 27 with every member slot filled."""
    return Project.objects.create(
        name='Riverside Tower',
        state_code='27',
        owner=owner,
        engineer=engineer,
        manager=manager,
        purchase_manager=purchaser,
    )


@pytest.fixture
def other_project(db, owner, engineer, manager, purchaser):
    """Second project with the same members."""
    return Project.objects.create(
        name='Hillside Villas',
        state_code='27',
        owner=owner,
        engineer=engineer,
        manager=manager,
        purchase_manager=purchaser,
    )


@pytest.fixture
def materials():
    return [
        {'name': 'Cement', 'quantity': '50', 'unit': 'bag'},
        {'name': 'Sand', 'quantity': '10', 'unit': 'tonne'},
    ]


@pytest.fixture
def material_request(project, manager, materials):
    """Material request in REQUESTED status."""
    return create_material_request(project_id=project.id, user=manager, materials=materials)


@pytest.fixture
def approved_material_request(material_request, engineer, owner):
    """Material request in OWNER_APPROVED status."""
    engineer_approve_material_request(mr_id=material_request.id, user=engineer)
    return owner_approve_material_request(mr_id=material_request.id, user=owner)


@pytest.fixture
def purchase_order(project, approved_material_request, purchaser):
    return create_purchase_order(
        project_id=project.id,
        mr_id=approved_material_request.id,
        user=purchaser,
        vendor='Pune Cement Traders',
        rate_details=[{'item': 'Cement', 'rate': '380.00', 'unit': 'bag'}],
        gst_type=GSTType.CGST_SGST,
    )


@pytest.fixture
def goods_receipt(project, purchase_order, manager):
    return confirm_goods_receipt(
        project_id=project.id,
        po_id=purchase_order.id,
        user=manager,
        received_qty=[{'item': 'Cement', 'quantity': '50'}],
    )


@pytest.fixture
def bill(project, purchase_order, goods_receipt, manager):
    """Intra-state bill: 1000 @ 18%."""
    return create_bill(
        project_id=project.id,
        po_id=purchase_order.id,
        grn_id=goods_receipt.id,
        user=manager,
        vendor_gstin='27AABCU9603R1ZM',
        taxable_amount=Decimal('1000'),
        gst_rate=Decimal('18'),
        vendor_state_code='27',
        project_state_code='27',
    )


@pytest.fixture
def media_root(settings, tmp_path):
    """Point default_storage at a temporary directory."""
    settings.MEDIA_ROOT = str(tmp_path)
    settings.MEDIA_URL = '/media/'
    return tmp_path


@pytest.fixture
def client_for(api_client):
    """Return a factory that authenticates the API client as a user."""
    def _client_for(user):
        refresh = RefreshToken.for_user(user)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return api_client
    return _client_for
