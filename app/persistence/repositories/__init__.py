"""Repository implementations."""

from app.persistence.repositories.base import BaseRepository
from app.persistence.repositories.follow_up_reminder_repository import FollowUpReminderRepository
from app.persistence.repositories.notification_repository import NotificationRepository
from app.persistence.repositories.tenant_channel_config_repository import (
    TenantChannelConfigRepository,
)

__all__ = [
    "BaseRepository",
    "NotificationRepository",
    "FollowUpReminderRepository",
    "TenantChannelConfigRepository",
]
