import re
import ssl
import smtplib
import logging
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

from .config import Settings
from .core.models import PasswordRecord

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

INVALID_ADDRESS_MESSAGE = "Please enter a valid email address."


@dataclass
class SendResult:
    success: bool
    message: str


def is_valid_email(address: Optional[str]) -> bool:
    return bool(address) and bool(_EMAIL_PATTERN.match(address.strip()))


def build_message(sender: str, recipient: str, record: PasswordRecord) -> EmailMessage:
    msg = EmailMessage()
    msg['Subject'] = f"Your PassGenius password for {record.username}"
    msg['From'] = sender
    msg['To'] = recipient
    msg.set_content(
        f"Username: {record.username}\n"
        f"Password: {record.password}\n"
        f"Generated: {record.date.astimezone().strftime('%x %X')}\n"
    )
    return msg


class EmailSender:
    """Sends a single password record over SMTP."""

    def __init__(self, settings: Settings, timeout: float = 10.0):
        self.settings = settings
        self.timeout = timeout

    def send_record(self, recipient: str, record: PasswordRecord) -> SendResult:
        """Email a record to an address.

        Never raises for delivery problems: the result carries a message
        suitable for showing to the user.
        """
        if not is_valid_email(recipient):
            return SendResult(False, INVALID_ADDRESS_MESSAGE)

        s = self.settings
        sender = s.smtp_sender or s.smtp_username
        if not s.smtp_host or not sender:
            return SendResult(False, "Email delivery is not configured (set PASSGENIUS_SMTP_HOST).")

        msg = build_message(sender, recipient.strip(), record)
        try:
            with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=self.timeout) as smtp:
                if s.smtp_starttls:
                    smtp.starttls(context=ssl.create_default_context())
                if s.smtp_username and s.smtp_password:
                    smtp.login(s.smtp_username, s.smtp_password)
                smtp.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed: {e}")
            return SendResult(False, "Could not log in to the mail server.")
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {recipient}: {e}")
            return SendResult(False, f"Failed to send email: {e}")

        logger.info(f"Sent password for {record.username} to {recipient}")
        return SendResult(True, f"Password for {record.username} sent to {recipient.strip()}.")
