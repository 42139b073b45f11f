"""
Email utilities: configuration, message structure, and SMTP-based sending.

This module provides:
- EmailMessage: validated email message dataclass.
- EmailConfig: SMTP configuration built from application settings.
- is_valid_email: address check backed by email-validator.
- send_email: blocking SMTP send.
"""

from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import TYPE_CHECKING, Mapping

from email_validator import EmailNotValidError, validate_email

from portal.core.logging import get_logger

if TYPE_CHECKING:
    from portal.config.settings import Settings

logger = get_logger(__name__)


class EmailError(Exception):
    """Raised when a message is malformed or the SMTP exchange fails."""


def is_valid_email(address: str | None) -> bool:
    if not address:
        return False
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


@dataclass
class EmailMessage:
    """Email message structure with validation."""
    subject: str
    to: list[str]
    body_text: str | None = None
    body_html: str | None = None
    reply_to: str | None = None
    headers: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        if not self.subject.strip():
            raise EmailError("Subject cannot be empty")

        if not self.to:
            raise EmailError("At least one recipient is required")

        if not self.body_text and not self.body_html:
            raise EmailError("Either body_text or body_html must be provided")

        for address in self.to:
            if not is_valid_email(address):
                raise EmailError(f"Invalid recipient email: {address}")


@dataclass
class EmailConfig:
    """SMTP configuration."""
    smtp_host: str
    smtp_port: int
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    timeout: int = 30
    from_email: str | None = None
    from_name: str | None = None

    @classmethod
    def from_settings(cls, config: Settings) -> EmailConfig:
        return cls(
            smtp_host=config.SMTP_HOST,
            smtp_port=config.SMTP_PORT,
            username=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_TLS,
            timeout=config.SMTP_TIMEOUT,
            from_email=config.EMAIL_FROM_ADDRESS,
            from_name=config.EMAIL_FROM_NAME,
        )

    @property
    def sender(self) -> str:
        address = self.from_email or self.username or ""
        if self.from_name and address:
            return formataddr((self.from_name, address))
        return address


def build_mime(message: EmailMessage, config: EmailConfig) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = message.subject
    msg["From"] = config.sender
    msg["To"] = ", ".join(message.to)
    if message.reply_to:
        msg["Reply-To"] = message.reply_to

    if message.headers:
        for key, value in message.headers.items():
            msg[key] = value

    # Plain text first; clients render the last part they support
    if message.body_text:
        msg.attach(MIMEText(message.body_text, "plain", "utf-8"))
    if message.body_html:
        msg.attach(MIMEText(message.body_html, "html", "utf-8"))
    return msg


def send_email(message: EmailMessage, config: EmailConfig) -> None:
    """
    Send an email using SMTP.

    Raises:
        EmailError: If no sender is configured or the SMTP exchange fails
    """
    if not config.sender:
        raise EmailError("No sender address configured (EMAIL_FROM_ADDRESS or SMTP_USER)")

    msg = build_mime(message, config)
    try:
        with smtplib.SMTP(config.smtp_host, config.smtp_port, timeout=config.timeout) as server:
            if config.use_tls:
                server.starttls()
            if config.username and config.password:
                server.login(config.username, config.password)
            server.send_message(msg, to_addrs=message.to)
    except (smtplib.SMTPException, OSError) as e:
        raise EmailError(f"Failed to send email: {e}") from e

    logger.info(f"Email '{message.subject}' sent to {len(message.to)} recipient(s)")
