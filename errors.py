"""Faults raised along the submission path and mapped by the orchestrator."""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from notifier import NotificationReport


class InquiryFault(Exception):
    """Base class for everything the submission path knows how to report."""


class DirectoryFault(InquiryFault):
    """The customer/employee directory could not be queried."""


class AmbiguousCustomerMatch(DirectoryFault):
    def __init__(self, email: Optional[str], customer_ids: List[str]):
        self.email = email
        self.customer_ids = customer_ids
        super().__init__(f"{len(customer_ids)} customers share the email address: {customer_ids}")


class RecordWriteFault(InquiryFault):
    """The inquiry record could not be persisted."""


class RequiredFieldsMissing(RecordWriteFault):
    def __init__(self, record_type: str, fields: List[str]):
        self.record_type = record_type
        self.fields = fields
        super().__init__(f"{record_type}: missing required fields {', '.join(fields)}")


class MailFault(InquiryFault):
    """A notification could not be handed to the mail transport."""

    def __init__(self, message: str, report: Optional["NotificationReport"] = None):
        self.report = report
        super().__init__(message)
