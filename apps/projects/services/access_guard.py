"""
Access guard.

Resolves the caller's role and project membership before any workflow
action. The check is read-only; the returned ScopeContext is passed on
through the operation so nothing downstream re-queries who the caller is.
"""

from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from django.core.exceptions import ValidationError

from apps.accounts.models import User, UserRole
from apps.projects.models import Project

from .exceptions import ProjectNotFoundError, PreconditionFailedError


REQUESTER_ROLES = frozenset({UserRole.MANAGER, UserRole.FIELD_MANAGER})
ENGINEER_ROLES = frozenset({UserRole.ENGINEER, UserRole.PROJECT_ENGINEER})
OWNER_ROLES = frozenset({UserRole.OWNER, UserRole.OWNER_CLIENT})
PURCHASER_ROLES = frozenset({UserRole.PURCHASE_MANAGER})
BILL_VIEWER_ROLES = frozenset({
    UserRole.ENGINEER,
    UserRole.MANAGER,
    UserRole.FIELD_MANAGER,
    UserRole.OWNER,
    UserRole.OWNER_CLIENT,
})


@dataclass(frozen=True)
class ScopeContext:
    """Authorization snapshot for one workflow operation."""

    project: Project
    user: User
    role: str

    @property
    def project_id(self) -> UUID:
        return self.project.id


def check_scope(
    *,
    project_id: UUID,
    user: User,
    allowed_roles: Iterable[str]
) -> ScopeContext:
    """
    Verify that ``user`` may act on ``project_id`` with one of ``allowed_roles``.

    Checks run in a fixed order: project exists, project is active, role is
    allowed, user holds a member slot on the project.

    Args:
        project_id: UUID of the project being acted on
        user: Authenticated caller
        allowed_roles: Roles permitted for the operation

    Returns:
        ScopeContext with the project, caller and resolved role

    Raises:
        ProjectNotFoundError: If the project doesn't exist
        PreconditionFailedError: If the project is inactive, the role is not
            allowed, or the user is not a project member
    """
    try:
        project = Project.objects.get(id=project_id)
    except (Project.DoesNotExist, ValidationError):
        raise ProjectNotFoundError(f"Project {project_id} not found")

    if not project.is_active:
        raise PreconditionFailedError("Project not active")

    role = user.role
    if not role or role not in set(allowed_roles):
        raise PreconditionFailedError(f"Role {role or 'NONE'} not allowed for this action")

    if not project.has_member(user):
        raise PreconditionFailedError("User is not a member of this project")

    return ScopeContext(project=project, user=user, role=role)
