"""
Material request service.

Creates material requests and advances them through the two approvals:
REQUESTED -> ENGINEER_APPROVED -> OWNER_APPROVED. Each approval locks the
row before checking its status, so a request is advanced exactly once.
"""

import logging
from typing import List
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.procurement.models import MaterialRequest, MaterialRequestStatus
from apps.projects.services import (
    check_scope,
    REQUESTER_ROLES,
    ENGINEER_ROLES,
    OWNER_ROLES,
    NotFoundError,
    PreconditionFailedError,
)

logger = logging.getLogger(__name__)


def _lock_material_request(mr_id: UUID) -> MaterialRequest:
    try:
        return (
            MaterialRequest.objects
            .select_for_update()
            .get(id=mr_id)
        )
    except (MaterialRequest.DoesNotExist, ValidationError):
        raise NotFoundError(f"Material request {mr_id} not found")


@transaction.atomic
def create_material_request(
    *,
    project_id: UUID,
    user: User,
    materials: List[dict]
) -> MaterialRequest:
    """
    Raise a new material request on a project.

    Args:
        project_id: UUID of the project
        user: Manager or field manager raising the request
        materials: Requested materials, one dict per line

    Returns:
        Created MaterialRequest in REQUESTED status

    Raises:
        ProjectNotFoundError: If project doesn't exist
        PreconditionFailedError: If access is denied or materials is empty
    """
    scope = check_scope(project_id=project_id, user=user, allowed_roles=REQUESTER_ROLES)

    if not materials:
        raise PreconditionFailedError("At least one material is required")

    mr = MaterialRequest.objects.create(
        project=scope.project,
        materials=list(materials),
        status=MaterialRequestStatus.REQUESTED,
        requested_by=scope.user,
    )

    logger.info(
        "Material request %s created on project %s by %s (%s)",
        mr.id, scope.project_id, user.id, scope.role,
    )
    return mr


@transaction.atomic
def engineer_approve_material_request(*, mr_id: UUID, user: User) -> MaterialRequest:
    """
    Engineer approval: REQUESTED -> ENGINEER_APPROVED.

    Raises:
        NotFoundError: If the material request doesn't exist
        PreconditionFailedError: If access is denied or status is not REQUESTED
    """
    mr = _lock_material_request(mr_id)
    scope = check_scope(project_id=mr.project_id, user=user, allowed_roles=ENGINEER_ROLES)

    if mr.status != MaterialRequestStatus.REQUESTED:
        raise PreconditionFailedError("MR must be REQUESTED")

    mr.status = MaterialRequestStatus.ENGINEER_APPROVED
    mr.engineer_approved = True
    mr.engineer_approved_by = scope.user
    mr.engineer_approved_at = timezone.now()
    mr.save(update_fields=[
        'status',
        'engineer_approved',
        'engineer_approved_by',
        'engineer_approved_at',
        'updated_at',
    ])

    logger.info("Material request %s approved by engineer %s (%s)", mr.id, user.id, scope.role)
    return mr


@transaction.atomic
def owner_approve_material_request(*, mr_id: UUID, user: User) -> MaterialRequest:
    """
    Owner approval: ENGINEER_APPROVED -> OWNER_APPROVED.

    OWNER_APPROVED is terminal for the request; purchase orders are
    separate records.

    Raises:
        NotFoundError: If the material request doesn't exist
        PreconditionFailedError: If access is denied or status is not ENGINEER_APPROVED
    """
    mr = _lock_material_request(mr_id)
    scope = check_scope(project_id=mr.project_id, user=user, allowed_roles=OWNER_ROLES)

    if mr.status != MaterialRequestStatus.ENGINEER_APPROVED:
        raise PreconditionFailedError("MR must be ENGINEER_APPROVED")

    mr.status = MaterialRequestStatus.OWNER_APPROVED
    mr.owner_approved = True
    mr.owner_approved_by = scope.user
    mr.owner_approved_at = timezone.now()
    mr.save(update_fields=[
        'status',
        'owner_approved',
        'owner_approved_by',
        'owner_approved_at',
        'updated_at',
    ])

    logger.info("Material request %s approved by owner %s (%s)", mr.id, user.id, scope.role)
    return mr
