import logging
import uuid

import pytest
from django.core.management import call_command

from apps.procurement.models import Bill, BillSource
from apps.procurement.services import (
    InvalidUploadPathError,
    build_upload_path,
    parse_bill_upload_path,
    handle_bill_upload,
)
from apps.procurement.signals import bill_file_finalized, bill_ingestion_rejected


@pytest.fixture
def rejections():
    """Collect (path, reason) pairs sent on the dead-letter signal."""
    received = []

    def receiver(sender, path, reason, **kwargs):
        received.append((path, reason))

    bill_ingestion_rejected.connect(receiver, weak=False)
    yield received
    bill_ingestion_rejected.disconnect(receiver)


def snapshot(bill):
    bill.refresh_from_db()
    return (bill.source, bill.ocr_data, bill.upload_path, bill.ocr_processed_at, bill.updated_at)


class TestParseBillUploadPath:

    def test_valid_path(self):
        project_id, bill_id = uuid.uuid4(), uuid.uuid4()
        upload = parse_bill_upload_path(f'bills/{project_id}/{bill_id}.JPG')

        assert upload.project_id == project_id
        assert upload.bill_id == bill_id
        assert upload.extension == 'jpg'

    def test_build_upload_path(self):
        project_id, bill_id = uuid.uuid4(), uuid.uuid4()

        assert build_upload_path(project_id, bill_id, '.PDF') == f'bills/{project_id}/{bill_id}.pdf'

    @pytest.mark.parametrize('path', [
        '',
        'random/file.jpg',
        'invoices/{project}/{bill}.jpg',
        'bills/{project}.jpg',
        'bills/{project}/{bill}/extra.jpg',
        'bills/{project}/{bill}',
        'bills/not-a-uuid/{bill}.jpg',
        'bills/{project}/not-a-uuid.jpg',
    ])
    def test_malformed_paths(self, path):
        path = path.format(project=uuid.uuid4(), bill=uuid.uuid4())

        with pytest.raises(InvalidUploadPathError):
            parse_bill_upload_path(path)

    def test_custom_prefix(self, settings):
        settings.PROCUREMENT_BILL_UPLOAD_PREFIX = 'uploads/bills'
        project_id, bill_id = uuid.uuid4(), uuid.uuid4()

        upload = parse_bill_upload_path(f'uploads/bills/{project_id}/{bill_id}.jpg')
        assert upload.bill_id == bill_id

        with pytest.raises(InvalidUploadPathError):
            parse_bill_upload_path(f'bills/{project_id}/{bill_id}.jpg')


@pytest.mark.django_db
class TestHandleBillUpload:

    def test_random_path_is_ignored(self, bill, rejections):
        before = snapshot(bill)

        result = handle_bill_upload('random/file.jpg')

        assert result is None
        assert snapshot(bill) == before
        assert rejections[0][0] == 'random/file.jpg'

    def test_rejection_logged_as_warning(self, bill, caplog):
        with caplog.at_level(logging.WARNING, logger='apps.procurement'):
            handle_bill_upload('random/file.jpg')

        assert 'random/file.jpg' in caplog.text
        assert any(record.levelno == logging.WARNING for record in caplog.records)

    def test_merges_ocr_data(self, bill, rejections):
        path = f'bills/{bill.project_id}/{bill.id}.jpg'

        result = handle_bill_upload(path)

        assert result is not None
        bill.refresh_from_db()
        assert bill.source == BillSource.OCR
        assert bill.upload_path == path
        assert bill.ocr_processed_at is not None
        assert bill.ocr_data['engine'] == 'placeholder'
        assert bill.ocr_data['file_name'] == f'{bill.id}.jpg'
        assert bill.ocr_data['content_type'] == 'image/jpeg'
        assert rejections == []

    def test_merge_keeps_other_keys(self, bill):
        Bill.objects.filter(id=bill.id).update(ocr_data={'reviewed': True})

        handle_bill_upload(f'bills/{bill.project_id}/{bill.id}.pdf')

        bill.refresh_from_db()
        assert bill.ocr_data['reviewed'] is True
        assert bill.ocr_data['content_type'] == 'application/pdf'

    def test_replay_is_idempotent(self, bill):
        path = f'bills/{bill.project_id}/{bill.id}.png'

        handle_bill_upload(path)
        bill.refresh_from_db()
        first = (bill.ocr_data, bill.upload_path, bill.source)

        handle_bill_upload(path)
        bill.refresh_from_db()
        assert (bill.ocr_data, bill.upload_path, bill.source) == first

    def test_unknown_bill_rejected(self, project, rejections):
        path = f'bills/{project.id}/{uuid.uuid4()}.jpg'

        assert handle_bill_upload(path) is None
        assert len(rejections) == 1
        assert 'not found' in rejections[0][1]

    def test_bill_on_other_project_rejected(self, bill, other_project, rejections):
        before = snapshot(bill)
        path = f'bills/{other_project.id}/{bill.id}.jpg'

        assert handle_bill_upload(path) is None
        assert snapshot(bill) == before
        assert 'does not belong' in rejections[0][1]

    def test_finalize_signal_triggers_ingestion(self, bill):
        bill_file_finalized.send(sender=Bill, name=f'bills/{bill.project_id}/{bill.id}.jpg')

        bill.refresh_from_db()
        assert bill.source == BillSource.OCR

    def test_finalize_signal_never_raises(self, db, rejections):
        bill_file_finalized.send(sender=Bill, name='bills/garbage')

        assert len(rejections) == 1


@pytest.mark.django_db
class TestIngestBillUploadCommand:
    """Tests for manage.py ingest_bill_upload"""

    def test_ingests_path(self, bill, capsys):
        call_command('ingest_bill_upload', f'bills/{bill.project_id}/{bill.id}.jpg')

        bill.refresh_from_db()
        assert bill.source == BillSource.OCR
        assert 'Ingested' in capsys.readouterr().out

    def test_reports_rejection(self, bill, capsys):
        call_command('ingest_bill_upload', 'random/file.jpg')

        assert 'Rejected random/file.jpg' in capsys.readouterr().out
        bill.refresh_from_db()
        assert bill.source == BillSource.MANUAL
