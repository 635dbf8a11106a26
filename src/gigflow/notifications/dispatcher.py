"""
Notification Dispatcher - Boundary to the messaging system

The workflow core only hands notifications over; delivery (push, email,
in-app inbox) belongs to whoever implements NotificationDispatcher.
"""

from typing import Protocol

from gigflow.kernel.logging import get_logger
from gigflow.notifications.models import Notification

logger = get_logger(__name__)


class NotificationDispatcher(Protocol):
    def send(self, notification: Notification) -> None:
        """
        Hand a notification to the messaging system

        Raises:
            NotificationError: If it could not be handed off
        """
        ...


class LoggingNotificationDispatcher:
    """
    Default dispatcher: writes each notification to the structured log

    Bodies stay out of the log; they can carry tracking numbers and
    personal remarks.
    """

    def send(self, notification: Notification) -> None:
        logger.info(
            "Notification dispatched",
            notification_id=notification.notification_id,
            kind=notification.kind,
            event_id=notification.event_id,
            to_user_id=notification.to_user_id,
            to_role=notification.to_role.value,
            subject=notification.subject,
            urgent=getattr(notification.metadata, "urgent", False),
        )
