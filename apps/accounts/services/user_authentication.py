"""
Login for site staff.

Users without a role may still log in; they see no projects and every
workflow call is refused by the access guard until staff assign a role.
"""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and stamp last_login.

    The email match is case-insensitive. The row is locked while
    last_login is written.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Account was deactivated by staff
    """
    email = (email or '').strip()

    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=email)
        .first()
    )

    if user is None or not user.check_password(password):
        logger.warning("Failed login for %s", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        logger.warning("Login attempt on deactivated account %s", user.id)
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info("User %s logged in (%s)", user.id, user.role or 'no role')
    return user
