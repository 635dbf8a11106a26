"""
Notifications - Messages between businesses, hosts and contractors
"""

from gigflow.notifications.dispatcher import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
)
from gigflow.notifications.models import (
    AcceptanceMetadata,
    CoordinationMetadata,
    MaterialConfirmationMetadata,
    Notification,
    PaymentConfirmationMetadata,
)
from gigflow.notifications.router import NotificationRouter

__all__ = [
    "AcceptanceMetadata",
    "CoordinationMetadata",
    "LoggingNotificationDispatcher",
    "MaterialConfirmationMetadata",
    "Notification",
    "NotificationDispatcher",
    "NotificationRouter",
    "PaymentConfirmationMetadata",
]
