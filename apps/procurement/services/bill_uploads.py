"""
Bill file uploads.

Stores a scanned bill under the upload layout and announces it on
bill_file_finalized, which triggers OCR ingestion.
"""

import logging
import posixpath
from uuid import UUID

from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage

from apps.accounts.models import User
from apps.procurement.models import Bill
from apps.procurement.signals import bill_file_finalized
from apps.projects.services import (
    check_scope,
    REQUESTER_ROLES,
    NotFoundError,
    PreconditionFailedError,
)

from .ocr_ingestion import build_upload_path

logger = logging.getLogger(__name__)


def store_bill_upload(*, project_id: UUID, bill_id: UUID, user: User, uploaded_file) -> str:
    """
    Save an uploaded bill file and send bill_file_finalized.

    A file previously uploaded for the same bill with the same extension
    is replaced.

    Args:
        project_id: UUID of the acting project
        bill_id: UUID of the bill the file belongs to
        user: Manager or field manager uploading the file
        uploaded_file: Django File with a name carrying the extension

    Returns:
        Storage name the file was saved under

    Raises:
        ProjectNotFoundError: If project doesn't exist
        NotFoundError: If the bill doesn't exist
        PreconditionFailedError: If access is denied or the bill belongs to
            another project
    """
    scope = check_scope(project_id=project_id, user=user, allowed_roles=REQUESTER_ROLES)

    try:
        bill = Bill.objects.get(id=bill_id)
    except (Bill.DoesNotExist, ValidationError):
        raise NotFoundError(f"Bill {bill_id} not found")

    if bill.project_id != scope.project_id:
        raise PreconditionFailedError("Bill does not belong to this project")

    extension = posixpath.splitext(uploaded_file.name)[1]
    if not extension:
        raise PreconditionFailedError("Uploaded file has no extension")

    name = build_upload_path(scope.project_id, bill.id, extension)
    if default_storage.exists(name):
        default_storage.delete(name)
    saved_name = default_storage.save(name, uploaded_file)

    logger.info("Stored bill upload %s for bill %s by %s (%s)", saved_name, bill.id, user.id, scope.role)

    bill_file_finalized.send(sender=Bill, name=saved_name)
    return saved_name
