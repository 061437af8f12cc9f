"""
Deployment constants for the inquiry intake flow.

These are fixed per deployment and handed to the resolver, writer and
notifier when they are built. Transport settings (SMTP, database) still come
from the environment; see database.py and mailer.py.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class MatchPolicy(str, Enum):
    """How the resolver treats more than one customer with the same email."""

    LAST_WINS = "last_wins"
    FIRST_WINS = "first_wins"
    REJECT_AMBIGUOUS = "reject_ambiguous"


class InquiryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Internal employee used as mail author and fallback recipient
    system_employee_id: str = "-5"

    customer_type: str = "customer"
    employee_type: str = "employee"
    inquiry_record_type: str = "inquiry"

    # Inquiry record field ids
    name_field: str = "customer_name"
    email_field: str = "customer_email"
    subject_field: str = "subject"
    message_field: str = "message"
    customer_field: str = "customer"

    notification_subject: str = "Record Creation"
    notification_template: str = "record_created.txt"

    match_policy: MatchPolicy = MatchPolicy.LAST_WINS
    enforce_required_fields: bool = False


DEFAULT_CONFIG = InquiryConfig()
