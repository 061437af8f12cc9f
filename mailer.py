"""
Outbound mail for notifications.

SmtpMailTransport sends plain-text mail over smtplib. Authors and recipients
may be addresses or internal employee ids; ids are turned into addresses with
the employee directory.
"""

import logging
import os
import smtplib
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Callable, List, Optional

from config import InquiryConfig
from errors import MailFault
from ports import Column, DirectoryQuery, Filter, MailTransport, Recipient

logger = logging.getLogger(__name__)

SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASS = os.getenv("SMTP_PASS")
FROM_NAME = os.getenv("FROM_NAME", "Inquiry Desk")
FROM_EMAIL = os.getenv("FROM_EMAIL") or SMTP_USER or "no-reply@inquiries.local"

RecipientLookup = Callable[[str], Optional[str]]


def redact_email(email: str) -> str:
    """Redact email address for safe logging (e.g., u***@example.com)."""
    try:
        local, domain = email.split("@")
        return f"{local[0]}***@{domain}" if local else f"***@{domain}"
    except (ValueError, IndexError):
        return "***"


def employee_email_lookup(directory: DirectoryQuery, config: InquiryConfig) -> RecipientLookup:
    """Return a lookup from employee id to that employee's email address."""

    def lookup(employee_id: str) -> Optional[str]:
        for result in directory.search(
            config.employee_type,
            [Filter("internalid", "is", employee_id)],
            [Column("email")],
        ):
            return result.get_value("email") or None
        return None

    return lookup


class SmtpMailTransport(MailTransport):
    def __init__(
        self,
        host: str,
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        from_email: str = FROM_EMAIL,
        from_name: str = FROM_NAME,
        recipient_lookup: Optional[RecipientLookup] = None,
        timeout: float = 15,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.recipient_lookup = recipient_lookup
        self.timeout = timeout

    def _address(self, who: str) -> Optional[str]:
        if "@" in who:
            return who
        if self.recipient_lookup is None:
            return None
        return self.recipient_lookup(who)

    def send(self, author: str, recipients: Recipient, subject: str, body: str) -> None:
        if isinstance(recipients, str):
            recipients = [recipients]

        to_addrs: List[str] = []
        for recipient in recipients:
            address = self._address(str(recipient))
            if not address:
                raise MailFault(f"No email address for recipient {recipient}")
            to_addrs.append(address)

        from_email = self._address(str(author)) or self.from_email

        msg = MIMEText(body, "plain")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, from_email))
        msg["To"] = ", ".join(to_addrs)

        redacted = ", ".join(redact_email(a) for a in to_addrs)
        logger.info(f"SMTP: sending '{subject}' to {redacted}")
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                try:
                    server.starttls()
                except smtplib.SMTPNotSupportedError:
                    logger.debug(f"SMTP: {self.host} does not offer STARTTLS")
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.sendmail(from_email, to_addrs, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise MailFault(f"SMTP delivery to {redacted} failed: {type(e).__name__}: {e}") from e


class LoggingMailTransport(MailTransport):
    """Used when SMTP is not configured: messages are logged and dropped."""

    def send(self, author: str, recipients: Recipient, subject: str, body: str) -> None:
        logger.warning(f"SMTP not configured; dropping '{subject}' for {recipients}")


def build_mail_transport(directory: DirectoryQuery, config: InquiryConfig) -> MailTransport:
    if not SMTP_HOST:
        return LoggingMailTransport()
    return SmtpMailTransport(
        SMTP_HOST,
        SMTP_PORT,
        SMTP_USER,
        SMTP_PASS,
        recipient_lookup=employee_email_lookup(directory, config),
    )
