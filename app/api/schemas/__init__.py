"""API schemas package."""

from app.api.schemas.notification import (
    CamelModel,
    FollowUpReminderCreate,
    FollowUpReminderResponse,
    FollowUpReminderStatusUpdate,
    NotificationErrorResponse,
    NotificationResponse,
)

__all__ = [
    "CamelModel",
    "FollowUpReminderCreate",
    "FollowUpReminderResponse",
    "FollowUpReminderStatusUpdate",
    "NotificationErrorResponse",
    "NotificationResponse",
]
