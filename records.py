"""Creation of inquiry records from form submissions."""

import logging
from typing import Optional

from config import DEFAULT_CONFIG, InquiryConfig
from errors import RecordWriteFault
from ports import RecordStore
from schemas import Submission

logger = logging.getLogger(__name__)


class RecordWriter:
    def __init__(self, store: RecordStore, config: InquiryConfig = DEFAULT_CONFIG):
        self.store = store
        self.config = config

    def create_inquiry(self, submission: Submission, customer_id: Optional[str] = None) -> str:
        """
        Persist one inquiry and return its id.

        Values are stored as submitted. The customer link is set only when a
        customer id is given. Required fields are checked only when the
        config enables enforce_required_fields.
        """
        cfg = self.config
        try:
            record = self.store.create(cfg.inquiry_record_type)
            record.set_value(cfg.name_field, submission.name)
            record.set_value(cfg.email_field, submission.email)
            record.set_value(cfg.subject_field, submission.subject)
            record.set_value(cfg.message_field, submission.message)
            if customer_id:
                record.set_value(cfg.customer_field, customer_id)
            record_id = record.save(enforce_required_fields=cfg.enforce_required_fields)
        except RecordWriteFault:
            raise
        except Exception as e:
            raise RecordWriteFault(f"Could not create {cfg.inquiry_record_type} record: {e}") from e

        logger.info(f"Created {cfg.inquiry_record_type} record {record_id} (linked customer: {customer_id or '-'})")
        return str(record_id)
