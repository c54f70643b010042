"""Database models."""

from app.persistence.models.follow_up_reminder import FollowUpReminder, FollowUpStatus
from app.persistence.models.notification import (
    Notification,
    NotificationChannel,
    NotificationError,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from app.persistence.models.tenant_channel_config import TenantChannelConfig

__all__ = [
    "FollowUpReminder",
    "FollowUpStatus",
    "Notification",
    "NotificationChannel",
    "NotificationError",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
    "TenantChannelConfig",
]
