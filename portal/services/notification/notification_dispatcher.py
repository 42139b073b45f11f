"""
Best-effort delivery of lifecycle notifications.
"""

from typing import Any, Dict, Optional

from portal.core.exceptions import ErrorCode
from portal.core.logging import get_logger
from portal.models.announcement import Announcement
from portal.services.notification.notification_sender import NotificationSender

logger = get_logger(__name__)


class NotificationDispatcher:
    """
    Wraps a sender so that delivery failures never reach the caller.

    Notifications are sent after the state change has committed. A failure
    is logged as UPSTREAM_FAILURE and the committed change stands.
    """

    def __init__(self, sender: NotificationSender):
        self.sender = sender

    def dispatch(
        self,
        event_kind: str,
        submission: Announcement,
        extra: Optional[Dict[str, Any]] = None,
    ) -> bool:
        try:
            self.sender.notify(event_kind, submission, extra)
        except Exception as e:
            logger.error(
                f"Failed to send '{event_kind}' notification for announcement "
                f"{submission.id}: {e}",
                exc_info=True,
                extra={
                    "error_code": ErrorCode.UPSTREAM_FAILURE.value,
                    "announcement_id": submission.id,
                    "event": event_kind,
                },
            )
            return False
        return True
