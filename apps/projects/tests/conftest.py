import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.projects.models import Project, ProjectStatus


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
    """Create an active project with every member slot filled."""
    return Project.objects.create(
        name='Riverside Tower',
        state_code='27',
        owner=owner,
        engineer=engineer,
        manager=manager,
        purchase_manager=purchaser,
    )


@pytest.fixture
def inactive_project(db, owner, manager):
    return Project.objects.create(
        name='Paused Site',
        status=ProjectStatus.ON_HOLD,
        owner=owner,
        manager=manager,
    )


@pytest.fixture
def client_for(api_client):
    """Return a factory that authenticates the API client as a user."""
    def _client_for(user):
        refresh = RefreshToken.for_user(user)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return api_client
    return _client_for
