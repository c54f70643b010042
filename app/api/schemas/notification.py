"""Notification and follow-up reminder schemas (camelCase on the wire)."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.clock import isoformat
from app.persistence.models.follow_up_reminder import FollowUpReminder
from app.persistence.models.notification import Notification


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationErrorResponse(CamelModel):
    """One failed delivery attempt."""

    message: str
    timestamp: str
    channel: str | None = None


class NotificationResponse(CamelModel):
    """Notification as seen by the recipient's client."""

    id: str
    tenant_id: str | None = None
    type: str
    priority: str
    title: str
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    recipient_id: str
    recipient_email: str
    recipient_name: str
    recipient_phone: str | None = None
    customer_id: str | None = None
    customer_name: str | None = None
    lead_id: str | None = None
    reminder_id: str | None = None
    channels: list[str]
    scheduled_for: str | None = None
    status: str
    attempts: int
    max_attempts: int
    email_sent: bool
    email_sent_at: str | None = None
    whatsapp_sent: bool
    whatsapp_sent_at: str | None = None
    browser_sent: bool
    browser_sent_at: str | None = None
    sms_sent: bool
    sms_sent_at: str | None = None
    created_at: str
    updated_at: str
    sent_at: str | None = None
    read_at: str | None = None
    errors: list[NotificationErrorResponse] = Field(default_factory=list)

    @classmethod
    def from_model(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            tenant_id=notification.tenant_id,
            type=notification.type,
            priority=notification.priority,
            title=notification.title,
            message=notification.message,
            metadata=notification.extra_data or {},
            recipient_id=notification.recipient_id,
            recipient_email=notification.recipient_email,
            recipient_name=notification.recipient_name,
            recipient_phone=notification.recipient_phone,
            customer_id=notification.customer_id,
            customer_name=notification.customer_name,
            lead_id=notification.lead_id,
            reminder_id=notification.reminder_id,
            channels=list(notification.channels or []),
            scheduled_for=isoformat(notification.scheduled_for),
            status=notification.status,
            attempts=notification.attempts,
            max_attempts=notification.max_attempts,
            email_sent=notification.email_sent,
            email_sent_at=isoformat(notification.email_sent_at),
            whatsapp_sent=notification.whatsapp_sent,
            whatsapp_sent_at=isoformat(notification.whatsapp_sent_at),
            browser_sent=notification.browser_sent,
            browser_sent_at=isoformat(notification.browser_sent_at),
            sms_sent=notification.sms_sent,
            sms_sent_at=isoformat(notification.sms_sent_at),
            created_at=isoformat(notification.created_at),
            updated_at=isoformat(notification.updated_at),
            sent_at=isoformat(notification.sent_at),
            read_at=isoformat(notification.read_at),
            errors=[
                NotificationErrorResponse(
                    message=error.message,
                    timestamp=isoformat(error.timestamp),
                    channel=error.channel,
                )
                for error in notification.errors
            ],
        )


class FollowUpReminderCreate(CamelModel):
    """Follow-up reminder creation request."""

    customer_id: str
    customer_name: str
    created_by: str
    created_by_name: str
    created_by_email: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    tenant_id: str | None = None
    title: str
    description: str = ""
    scheduled_for: datetime
    priority: str = "medium"


class FollowUpReminderStatusUpdate(CamelModel):
    """Follow-up reminder status change."""

    status: str
    completed_by: str | None = None


class FollowUpReminderResponse(CamelModel):
    """Follow-up reminder response."""

    id: str
    tenant_id: str | None = None
    customer_id: str
    customer_name: str
    customer_email: str | None = None
    customer_phone: str | None = None
    created_by: str
    created_by_name: str
    created_by_email: str | None = None
    title: str
    description: str
    scheduled_for: str
    priority: str
    status: str
    notification_sent: bool
    notification_sent_at: str | None = None
    notification_id: str | None = None
    completed_at: str | None = None
    completed_by: str | None = None
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, reminder: FollowUpReminder) -> "FollowUpReminderResponse":
        return cls(
            id=reminder.id,
            tenant_id=reminder.tenant_id,
            customer_id=reminder.customer_id,
            customer_name=reminder.customer_name,
            customer_email=reminder.customer_email,
            customer_phone=reminder.customer_phone,
            created_by=reminder.created_by,
            created_by_name=reminder.created_by_name,
            created_by_email=reminder.created_by_email,
            title=reminder.title,
            description=reminder.description or "",
            scheduled_for=isoformat(reminder.scheduled_for),
            priority=reminder.priority,
            status=reminder.status,
            notification_sent=reminder.notification_sent,
            notification_sent_at=isoformat(reminder.notification_sent_at),
            notification_id=reminder.notification_id,
            completed_at=isoformat(reminder.completed_at),
            completed_by=reminder.completed_by,
            created_at=isoformat(reminder.created_at),
            updated_at=isoformat(reminder.updated_at),
        )
