"""
Notification senders for submission lifecycle events.

Two backends share the ``NotificationSender`` protocol:

- ``EmailNotificationSender`` renders the Jinja2 templates under
  ``portal/templates/email`` and sends them over SMTP.
- ``LoggingNotificationSender`` only logs, for development and tests.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from jinja2 import Environment, FileSystemLoader, select_autoescape

from portal.config import Settings
from portal.core.logging import get_logger
from portal.models.announcement import Announcement
from portal.utils.email import EmailConfig, EmailMessage, is_valid_email, send_email

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parents[2] / "templates" / "email"


class NotificationEvent:
    APPROVED = "approved"
    REJECTED = "rejected"
    RECEIVED = "received"
    PENDING_REVIEW = "pending_review"

    ALL = (APPROVED, REJECTED, RECEIVED, PENDING_REVIEW)


class NotificationSender(Protocol):
    def notify(
        self,
        event_kind: str,
        submission: Announcement,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        ...


def resolve_coordinator_address(
    coordinator: Optional[str],
    config: Settings,
) -> Optional[str]:
    """
    Email address for an approval coordinator.

    ``approval_coordinator`` is either an address already or a key into
    ``APPROVAL_COORDINATOR_EMAILS``.
    """
    coordinator = (coordinator or config.DEFAULT_APPROVAL_COORDINATOR or "").strip()
    if not coordinator:
        return None
    if is_valid_email(coordinator):
        return coordinator
    return config.APPROVAL_COORDINATOR_EMAILS.get(coordinator)


class LoggingNotificationSender:
    """Writes each notification to the log instead of sending it."""

    def __init__(self):
        self.sent: List[Dict[str, Any]] = []

    def notify(
        self,
        event_kind: str,
        submission: Announcement,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        record = {
            "event": event_kind,
            "announcement_id": submission.id,
            "submitter": submission.email,
            "ministry": submission.ministry,
        }
        if extra:
            record.update(extra)
        self.sent.append(record)
        logger.info(f"Notification '{event_kind}' for announcement {submission.id}", extra=record)


class EmailNotificationSender:
    """
    Sends lifecycle emails.

    Submitter-facing events go to ``submission.email``; ``pending_review``
    goes to the ministry's approval coordinator.
    """

    SUBJECTS = {
        NotificationEvent.APPROVED: "Announcement Approved",
        NotificationEvent.REJECTED: "Announcement - Update Required",
        NotificationEvent.RECEIVED: "Announcement Received",
        NotificationEvent.PENDING_REVIEW: "Announcement Awaiting Your Approval",
    }

    def __init__(
        self,
        config: Settings,
        email_config: Optional[EmailConfig] = None,
        template_dir: Path = TEMPLATE_DIR,
    ):
        self.config = config
        self.email_config = email_config or EmailConfig.from_settings(config)
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def render(
        self,
        event_kind: str,
        submission: Announcement,
        extra: Optional[Dict[str, Any]] = None,
    ) -> EmailMessage:
        if event_kind not in self.SUBJECTS:
            raise ValueError(f"Unknown notification event: {event_kind}")

        template = self.env.get_template(f"{event_kind}.html")
        body_html = template.render(
            announcement=submission,
            from_name=self.config.EMAIL_FROM_NAME,
            **(extra or {}),
        )

        if event_kind == NotificationEvent.PENDING_REVIEW:
            recipient = resolve_coordinator_address(submission.approval_coordinator, self.config)
            if recipient is None:
                raise ValueError(
                    f"No email address configured for coordinator "
                    f"'{submission.approval_coordinator}'"
                )
            reply_to = submission.email
        else:
            recipient = submission.email
            reply_to = None

        return EmailMessage(
            subject=f"{self.config.EMAIL_FROM_NAME} {self.SUBJECTS[event_kind]}",
            to=[recipient],
            body_html=body_html,
            reply_to=reply_to,
        )

    def notify(
        self,
        event_kind: str,
        submission: Announcement,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        send_email(self.render(event_kind, submission, extra), self.email_config)


def build_notification_sender(config: Settings) -> NotificationSender:
    if config.NOTIFICATION_BACKEND == "email":
        return EmailNotificationSender(config)
    return LoggingNotificationSender()
