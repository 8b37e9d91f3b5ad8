"""
Bill upload ingestion.

Runs when a bill file lands in storage under
``{PROCUREMENT_BILL_UPLOAD_PREFIX}/{project_id}/{bill_id}.{ext}``.
Extracted fields from the placeholder OCR engine are merged into the
matching bill.

Nothing here raises for bad input. Uploads that can't be matched to a
bill are logged at WARNING and sent to the bill_ingestion_rejected
signal; the bill table is left untouched.
"""

import logging
import mimetypes
import posixpath
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.procurement.models import Bill, BillSource
from apps.procurement.signals import bill_ingestion_rejected

logger = logging.getLogger(__name__)

PLACEHOLDER_ENGINE = 'placeholder'


class InvalidUploadPathError(ValueError):
    """Upload path doesn't follow the bill upload layout."""


@dataclass(frozen=True)
class BillUploadPath:
    path: str
    project_id: UUID
    bill_id: UUID
    extension: str


def get_upload_prefix() -> str:
    return getattr(settings, 'PROCUREMENT_BILL_UPLOAD_PREFIX', 'bills').strip('/')


def build_upload_path(project_id, bill_id, extension: str) -> str:
    return f"{get_upload_prefix()}/{project_id}/{bill_id}.{extension.lstrip('.').lower()}"


def parse_bill_upload_path(path: str) -> BillUploadPath:
    """
    Split an upload path into project id, bill id and extension.

    Raises:
        InvalidUploadPathError: If the path doesn't match the layout
    """
    if not path:
        raise InvalidUploadPathError("Empty path")

    prefix = get_upload_prefix() + '/'
    relative = path.strip('/')
    if not relative.startswith(prefix):
        raise InvalidUploadPathError(f"Path is not under '{prefix}'")

    segments = relative[len(prefix):].split('/')
    if len(segments) != 2:
        raise InvalidUploadPathError(f"Expected project and file segments, got {len(segments)}")

    project_part, file_name = segments

    stem, extension = posixpath.splitext(file_name)
    if not stem or not extension or extension == '.':
        raise InvalidUploadPathError("File name has no extension")

    try:
        project_id = UUID(project_part)
        bill_id = UUID(stem)
    except ValueError:
        raise InvalidUploadPathError("Project or bill id is not a UUID")

    return BillUploadPath(
        path=path,
        project_id=project_id,
        bill_id=bill_id,
        extension=extension[1:].lower(),
    )


def extract_bill_fields(upload: BillUploadPath) -> dict:
    """
    Placeholder OCR engine.

    Returns the same payload for the same upload, so replaying an event
    leaves the bill unchanged apart from ocr_processed_at.
    """
    content_type, _ = mimetypes.guess_type(upload.path)
    return {
        'engine': PLACEHOLDER_ENGINE,
        'file_name': posixpath.basename(upload.path),
        'content_type': content_type or 'application/octet-stream',
        'vendor_gstin': None,
        'invoice_number': None,
        'invoice_date': None,
        'taxable_amount': None,
        'total_amount': None,
        'line_items': [],
    }


def _reject(path: str, reason: str) -> None:
    logger.warning("Rejected bill upload %s: %s", path, reason)
    bill_ingestion_rejected.send(sender=Bill, path=path, reason=reason)


def handle_bill_upload(path: str) -> Optional[Bill]:
    """
    Merge OCR output for an uploaded bill file.

    Args:
        path: Storage name of the uploaded file

    Returns:
        Updated Bill, or None if the upload was rejected
    """
    try:
        upload = parse_bill_upload_path(path)
    except InvalidUploadPathError as e:
        _reject(path, str(e))
        return None

    with transaction.atomic():
        bill = (
            Bill.objects
            .select_for_update()
            .filter(id=upload.bill_id)
            .first()
        )

        if bill is None:
            reason = f"Bill {upload.bill_id} not found"
        elif bill.project_id != upload.project_id:
            reason = f"Bill {upload.bill_id} does not belong to project {upload.project_id}"
        else:
            reason = None

        if reason is None:
            extracted = extract_bill_fields(upload)
            bill.ocr_data = {**(bill.ocr_data or {}), **extracted}
            bill.upload_path = upload.path
            bill.ocr_processed_at = timezone.now()
            bill.source = BillSource.OCR
            bill.save(update_fields=[
                'ocr_data',
                'upload_path',
                'ocr_processed_at',
                'source',
                'updated_at',
            ])

    if reason is not None:
        _reject(path, reason)
        return None

    logger.info("Merged OCR data from %s into bill %s", path, bill.id)
    return bill
