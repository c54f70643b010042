"""Domain services."""

from app.domain.services.follow_up_service import FollowUpReminderService
from app.domain.services.notification_processor import NotificationProcessor, ProcessingSummary
from app.domain.services.notification_queue import NotificationData, NotificationQueueService

__all__ = [
    "FollowUpReminderService",
    "NotificationData",
    "NotificationProcessor",
    "NotificationQueueService",
    "ProcessingSummary",
]
