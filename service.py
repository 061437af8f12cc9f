"""
Inquiry intake workflow: customer lookup, record creation, notification.

submit() never raises. Faults are logged and returned as a tagged
SubmissionOutcome so the HTTP layer can pick a status. A record that was
written stays written when notification fails afterwards.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from errors import DirectoryFault, MailFault, RecordWriteFault
from forms import build_intake_form, render_form
from notifier import NotificationReport, Notifier
from records import RecordWriter
from resolver import CustomerResolver
from schemas import CustomerMatch, Submission

logger = logging.getLogger(__name__)


class SubmissionStatus(str, Enum):
    SUCCESS = "success"
    DIRECTORY_FAULT = "directory_fault"
    RECORD_WRITE_FAULT = "record_write_fault"
    MAIL_FAULT = "mail_fault"


@dataclass
class SubmissionOutcome:
    status: SubmissionStatus
    record_id: Optional[str] = None
    match: Optional[CustomerMatch] = None
    notifications: Optional[NotificationReport] = None
    error: Optional[str] = None

    @property
    def record_created(self) -> bool:
        return self.record_id is not None

    def confirmation(self) -> str:
        return f"Custom record created successfully! Internal ID: {self.record_id}"


class InquiryService:
    def __init__(self, resolver: CustomerResolver, writer: RecordWriter, notifier: Notifier, form_action: str = ""):
        self.resolver = resolver
        self.writer = writer
        self.notifier = notifier
        self.form_action = form_action

    def render_form(self) -> str:
        return render_form(build_intake_form(self.form_action))

    def submit(self, submission: Submission) -> SubmissionOutcome:
        try:
            match = self.resolver.resolve(submission.email)
        except DirectoryFault as e:
            logger.exception("Customer lookup failed")
            return SubmissionOutcome(SubmissionStatus.DIRECTORY_FAULT, error=str(e))

        try:
            record_id = self.writer.create_inquiry(submission, match.customer_id)
        except RecordWriteFault as e:
            logger.exception("Inquiry record could not be created")
            return SubmissionOutcome(SubmissionStatus.RECORD_WRITE_FAULT, match=match, error=str(e))

        try:
            report = self.notifier.notify(match.sales_owner_email)
        except MailFault as e:
            logger.exception(f"Notifications for record {record_id} failed")
            return SubmissionOutcome(
                SubmissionStatus.MAIL_FAULT,
                record_id=record_id,
                match=match,
                notifications=e.report,
                error=str(e),
            )

        return SubmissionOutcome(SubmissionStatus.SUCCESS, record_id=record_id, match=match, notifications=report)
