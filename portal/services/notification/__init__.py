from portal.services.notification.notification_dispatcher import NotificationDispatcher
from portal.services.notification.notification_sender import (
    EmailNotificationSender,
    LoggingNotificationSender,
    NotificationEvent,
    NotificationSender,
    build_notification_sender,
    resolve_coordinator_address,
)

__all__ = [
    "EmailNotificationSender",
    "LoggingNotificationSender",
    "NotificationDispatcher",
    "NotificationEvent",
    "NotificationSender",
    "build_notification_sender",
    "resolve_coordinator_address",
]
