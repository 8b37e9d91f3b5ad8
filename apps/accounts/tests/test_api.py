import logging

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.accounts.services import (
    authenticate_user,
    InvalidCredentialsError,
    InactiveAccountError,
)


def register_payload(email, **extra):
    return {
        'email': email,
        'password': 'SitePass123!',
        'password_confirm': 'SitePass123!',
        **extra,
    }


# =============================================================================
# Registration
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_new_account_has_no_role(self, api_client):
        response = api_client.post(
            reverse('users:register'),
            register_payload('foreman@example.com', display_name='Foreman'),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['role'] == ''
        assert set(response.data['tokens']) == {'access', 'refresh'}
        assert 'administrator' in response.data['message']

    def test_role_in_payload_is_ignored(self, api_client):
        response = api_client.post(
            reverse('users:register'),
            register_payload('sneaky@example.com', role=UserRole.OWNER),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email='sneaky@example.com').role == ''

    def test_email_taken_in_other_case(self, api_client, user):
        response = api_client.post(
            reverse('users:register'),
            register_payload(user.email.upper()),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data
        assert User.objects.count() == 1

    def test_password_confirmation_must_match(self, api_client):
        payload = register_payload('typo@example.com')
        payload['password_confirm'] = 'SitePass124!'

        response = api_client.post(reverse('users:register'), payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data


# =============================================================================
# Login
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_returns_role(self, api_client, user):
        response = api_client.post(
            reverse('users:login'),
            {'email': user.email, 'password': 'TestPass123!'},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['role'] == UserRole.MANAGER
        assert 'access' in response.data['tokens']

    def test_wrong_password_is_unauthorized(self, api_client, user):
        response = api_client.post(
            reverse('users:login'),
            {'email': user.email, 'password': 'NotThePass1!'},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid credentials'

    def test_deactivated_account_is_forbidden(self, api_client, user_inactive):
        response = api_client.post(
            reverse('users:login'),
            {'email': user_inactive.email, 'password': 'TestPass123!'},
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestAuthenticateUser:
    """Tests for the authenticate_user service."""

    def test_email_match_ignores_case(self, user):
        authenticated = authenticate_user(email='  TestUser@Example.com ', password='TestPass123!')

        assert authenticated == user
        assert authenticated.last_login is not None

    def test_user_without_role_can_log_in(self, db):
        pending = User.objects.create_user(email='pending@example.com', password='TestPass123!')

        assert authenticate_user(email=pending.email, password='TestPass123!') == pending

    def test_unknown_email(self, db):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='nobody@example.com', password='TestPass123!')

    def test_inactive_account(self, user_inactive):
        with pytest.raises(InactiveAccountError):
            authenticate_user(email=user_inactive.email, password='TestPass123!')

        user_inactive.refresh_from_db()
        assert user_inactive.last_login is None

    def test_failed_login_logged(self, user, caplog):
        with caplog.at_level(logging.WARNING, logger='apps.accounts'):
            with pytest.raises(InvalidCredentialsError):
                authenticate_user(email=user.email, password='wrong')

        assert user.email in caplog.text

    def test_success_logged_with_role(self, user, caplog):
        with caplog.at_level(logging.INFO, logger='apps.accounts'):
            authenticate_user(email=user.email, password='TestPass123!')

        assert str(user.id) in caplog.text
        assert UserRole.MANAGER in caplog.text


# =============================================================================
# Logout
# =============================================================================

@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_with_valid_refresh(self, authenticated_client, user):
        refresh = RefreshToken.for_user(user)

        response = authenticated_client.post(reverse('users:logout'), {'refresh': str(refresh)})

        assert response.status_code == status.HTTP_200_OK

    def test_logout_with_malformed_refresh(self, authenticated_client):
        response = authenticated_client.post(reverse('users:logout'), {'refresh': 'garbage'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid token'

    def test_logout_requires_token(self, api_client):
        response = api_client.post(reverse('users:logout'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Current user and profile
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/user/ and PATCH /api/auth/user/update/"""

    def test_profile_includes_role(self, authenticated_client, user):
        response = authenticated_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(user.id)
        assert response.data['role'] == UserRole.MANAGER

    def test_display_name_is_editable(self, authenticated_client, user):
        response = authenticated_client.patch(
            reverse('users:update-profile'),
            {'display_name': 'Site Manager'},
        )

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.display_name == 'Site Manager'

    @pytest.mark.parametrize('field, value', [
        ('role', UserRole.OWNER),
        ('email', 'elsewhere@example.com'),
    ])
    def test_read_only_fields_unchanged(self, authenticated_client, user, field, value):
        before = getattr(user, field)

        response = authenticated_client.patch(reverse('users:update-profile'), {field: value})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert getattr(user, field) == before

    def test_display_name_falls_back_to_email(self, user):
        user.display_name = ''

        assert user.get_display_name() == 'testuser'
