"""
Procurement signals.

bill_file_finalized is sent once a bill file has been fully written to
storage (upload endpoint, ingest_bill_upload command). Receivers get the
storage name as ``name``.

bill_ingestion_rejected is the dead-letter channel for uploads that could
not be merged into a bill. Receivers get ``path`` and ``reason``.
"""

from django.dispatch import Signal, receiver

bill_file_finalized = Signal()
bill_ingestion_rejected = Signal()


@receiver(bill_file_finalized)
def ingest_finalized_bill_file(sender, name, **kwargs):
    from apps.procurement.services.ocr_ingestion import handle_bill_upload

    handle_bill_upload(name)
