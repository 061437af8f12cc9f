"""
Record-creation notices.

Every submission mails the system identity; the customer's sales rep is
mailed too when the customer has one. The two sends are attempted
independently and a failed one does not stop the other.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from jinja2 import TemplateError

from config import DEFAULT_CONFIG, InquiryConfig
from errors import MailFault
from mailer import redact_email
from ports import Column, DirectoryQuery, Filter, MailTransport
from schemas import NotificationMessage
from templating import TemplateRenderer, template_renderer

logger = logging.getLogger(__name__)


@dataclass
class NotificationReport:
    sent: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class Notifier:
    def __init__(
        self,
        directory: DirectoryQuery,
        transport: MailTransport,
        config: InquiryConfig = DEFAULT_CONFIG,
        renderer: TemplateRenderer = template_renderer,
    ):
        self.directory = directory
        self.transport = transport
        self.config = config
        self.renderer = renderer

    def sender_name(self) -> str:
        """Display name of the system identity, or "" when it cannot be found."""
        try:
            for result in self.directory.search(
                self.config.employee_type,
                [Filter("internalid", "is", self.config.system_employee_id)],
                [Column("entityid")],
            ):
                return result.get_value("entityid") or ""
        except Exception:
            logger.exception(f"Lookup of employee {self.config.system_employee_id} failed")
            return ""
        logger.warning(f"Employee {self.config.system_employee_id} not found; signing notifications with an empty name")
        return ""

    def build_message(self, recipient: str, recipient_name: str, sender_name: str) -> NotificationMessage:
        body = self.renderer.render(
            self.config.notification_template,
            recipient_name=recipient_name,
            sender_name=sender_name,
        )
        return NotificationMessage(
            author=self.config.system_employee_id,
            recipients=recipient,
            subject=self.config.notification_subject,
            body=body,
        )

    def notify(self, sales_owner_email: Optional[str] = None) -> NotificationReport:
        sender_name = self.sender_name()
        report = NotificationReport()

        if sales_owner_email:
            self._deliver(report, sales_owner_email, recipient_name=sales_owner_email, sender_name=sender_name)

        self._deliver(report, self.config.system_employee_id, recipient_name=sender_name, sender_name=sender_name)

        if not report.ok:
            raise MailFault(f"{len(report.failed)} of {len(report.failed) + len(report.sent)} notifications failed", report)
        return report

    def _deliver(self, report: NotificationReport, recipient: str, recipient_name: str, sender_name: str) -> None:
        label = redact_email(recipient) if "@" in recipient else f"employee {recipient}"
        try:
            message = self.build_message(recipient, recipient_name, sender_name)
            self.transport.send(message.author, message.recipients, message.subject, message.body)
        except (MailFault, TemplateError) as e:
            logger.error(f"Notification to {label} failed: {e}")
            report.failed[recipient] = str(e)
            return
        except Exception as e:
            logger.exception(f"Notification to {label} failed")
            report.failed[recipient] = f"{type(e).__name__}: {e}"
            return
        logger.info(f"Notification sent to {label}")
        report.sent.append(recipient)
