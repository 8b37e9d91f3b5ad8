"""
Management command to replay OCR ingestion for a stored bill file.

Sends bill_file_finalized for the given storage name, exactly as the
upload endpoint does once a file is written.

Usage:
    python manage.py ingest_bill_upload bills/<project_id>/<bill_id>.pdf
"""

from django.core.management.base import BaseCommand

from apps.procurement.models import Bill
from apps.procurement.signals import bill_file_finalized, bill_ingestion_rejected


class Command(BaseCommand):
    help = 'Run OCR ingestion for an uploaded bill file'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Storage name of the uploaded bill file')

    def handle(self, *args, **options):
        path = options['path']
        rejections = []

        def collect(sender, path, reason, **kwargs):
            rejections.append(reason)

        bill_ingestion_rejected.connect(collect, weak=False)
        try:
            bill_file_finalized.send(sender=Bill, name=path)
        finally:
            bill_ingestion_rejected.disconnect(collect)

        if rejections:
            for reason in rejections:
                self.stdout.write(self.style.WARNING(f'Rejected {path}: {reason}'))
            return

        self.stdout.write(self.style.SUCCESS(f'Ingested {path}'))
