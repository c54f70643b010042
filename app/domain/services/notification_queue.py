"""Notification queue: the only entry point that creates notifications.

Creating a notification never delivers it. Records are inserted as
``pending`` and picked up by the processor on its next tick.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import isoformat, to_naive_utc, utcnow
from app.core.exceptions import ValidationError
from app.persistence.models.notification import (
    Notification,
    NotificationChannel,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from app.persistence.repositories.notification_repository import NotificationRepository
from app.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_CHANNELS = [NotificationChannel.BROWSER]
WELCOME_RECIPIENT_ID = "lead"

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
TYPE_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


@dataclass
class NotificationData:
    """Input for creating a notification."""

    type: str
    title: str
    message: str
    recipient_id: str
    recipient_email: str
    recipient_name: str = ""
    recipient_phone: str | None = None
    customer_id: str | None = None
    customer_name: str | None = None
    lead_id: str | None = None
    reminder_id: str | None = None
    tenant_id: str | None = None
    priority: str = NotificationPriority.MEDIUM
    channels: list[str] | None = None
    scheduled_for: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class NotificationQueueService:
    """Validates and enqueues notifications."""

    def __init__(self, session: AsyncSession, max_attempts: int | None = None) -> None:
        """Initialize notification queue service."""
        self.session = session
        self.notification_repo = NotificationRepository(session)
        self.max_attempts = max_attempts or settings.notification_max_attempts

    async def create_and_queue(self, data: NotificationData) -> Notification:
        """Validate and insert a pending notification.

        Args:
            data: Notification content, recipient and delivery plan

        Returns:
            The stored notification with its assigned id

        Raises:
            ValidationError: If required fields are missing or malformed
            StorageError: If the record could not be persisted
        """
        channels = self._validate(data)

        logger.info(f"Creating notification: {data.type} for {data.recipient_email}")

        notification = await self.notification_repo.insert(
            tenant_id=data.tenant_id,
            type=data.type,
            priority=data.priority,
            title=data.title,
            message=data.message,
            extra_data={k: v for k, v in (data.metadata or {}).items() if v is not None},
            recipient_id=data.recipient_id,
            recipient_email=data.recipient_email,
            recipient_name=data.recipient_name or "",
            recipient_phone=data.recipient_phone,
            customer_id=data.customer_id,
            customer_name=data.customer_name,
            lead_id=data.lead_id,
            reminder_id=data.reminder_id,
            channels=channels,
            scheduled_for=to_naive_utc(data.scheduled_for),
            status=NotificationStatus.PENDING,
            attempts=0,
            max_attempts=self.max_attempts,
        )

        logger.info(f"Notification queued with ID: {notification.id}")
        return notification

    def _validate(self, data: NotificationData) -> list[str]:
        """Check required fields and return the de-duplicated channel list."""
        if not data.recipient_id or not data.recipient_id.strip():
            raise ValidationError("recipientId is required")
        if not data.recipient_email or not data.recipient_email.strip():
            raise ValidationError("recipientEmail is required")
        if not EMAIL_PATTERN.match(data.recipient_email.strip()):
            raise ValidationError(
                "recipientEmail is not a valid email address",
                {"recipientEmail": data.recipient_email},
            )
        if not data.type or not TYPE_PATTERN.match(data.type):
            raise ValidationError("type must be a lowercase identifier", {"type": data.type})
        if not data.title or not data.title.strip():
            raise ValidationError("title is required")
        if data.priority not in NotificationPriority.ALL:
            raise ValidationError(
                f"priority must be one of {', '.join(NotificationPriority.ALL)}",
                {"priority": data.priority},
            )

        requested = data.channels if data.channels is not None else DEFAULT_CHANNELS
        channels: list[str] = []
        for channel in requested:
            if channel not in NotificationChannel.ALL:
                raise ValidationError(f"Unknown channel: {channel}", {"channel": channel})
            if channel not in channels:
                channels.append(channel)
        if not channels:
            raise ValidationError("channels must not be empty")
        return channels

    async def create_lead_assigned_notification(
        self,
        employee_id: str,
        employee_name: str,
        employee_email: str,
        lead_id: str,
        lead_name: str,
        lead_email: str,
        source: str,
        lead_phone: str | None = None,
        tenant_id: str | None = None,
    ) -> Notification:
        """Tell an employee a lead was assigned to them."""
        return await self.create_and_queue(
            NotificationData(
                type=NotificationType.LEAD_ASSIGNED,
                title=f"New Lead Assigned: {lead_name}",
                message=f"You have been assigned a new lead from {source}",
                recipient_id=employee_id,
                recipient_email=employee_email,
                recipient_name=employee_name,
                lead_id=lead_id,
                customer_name=lead_name,
                tenant_id=tenant_id,
                priority=NotificationPriority.HIGH,
                channels=[NotificationChannel.EMAIL, NotificationChannel.BROWSER],
                metadata={"leadEmail": lead_email, "leadPhone": lead_phone, "source": source},
            )
        )

    async def create_welcome_notification(
        self,
        lead_name: str,
        lead_email: str,
        source: str,
        lead_phone: str | None = None,
        assigned_employee: str | None = None,
        tenant_id: str | None = None,
    ) -> Notification:
        """Welcome a new lead by email, and by WhatsApp when a phone is known."""
        channels = [NotificationChannel.EMAIL]
        if lead_phone:
            channels.append(NotificationChannel.WHATSAPP)

        return await self.create_and_queue(
            NotificationData(
                type=NotificationType.WELCOME_MESSAGE,
                title="Welcome to KnotSync!",
                message="Thank you for your interest in our services",
                recipient_id=WELCOME_RECIPIENT_ID,
                recipient_email=lead_email,
                recipient_name=lead_name,
                recipient_phone=lead_phone,
                tenant_id=tenant_id,
                priority=NotificationPriority.MEDIUM,
                channels=channels,
                metadata={"source": source, "assignedEmployee": assigned_employee},
            )
        )

    async def create_follow_up_reminder_notification(
        self,
        employee_id: str,
        employee_name: str,
        employee_email: str,
        customer_id: str,
        customer_name: str,
        reminder_id: str,
        reminder_title: str,
        scheduled_for: datetime,
        reminder_description: str | None = None,
        customer_email: str | None = None,
        customer_phone: str | None = None,
        tenant_id: str | None = None,
    ) -> Notification:
        """Remind an employee of a due customer follow-up."""
        return await self.create_and_queue(
            NotificationData(
                type=NotificationType.FOLLOW_UP_REMINDER,
                title=f"Follow-up Reminder: {customer_name}",
                message=reminder_description or reminder_title,
                recipient_id=employee_id,
                recipient_email=employee_email,
                recipient_name=employee_name,
                customer_id=customer_id,
                customer_name=customer_name,
                reminder_id=reminder_id,
                tenant_id=tenant_id,
                priority=NotificationPriority.HIGH,
                channels=[NotificationChannel.EMAIL, NotificationChannel.BROWSER],
                scheduled_for=scheduled_for,
                metadata={"customerEmail": customer_email, "customerPhone": customer_phone},
            )
        )

    async def create_demo_notification(
        self,
        user_id: str,
        user_name: str,
        user_email: str,
        notification_type: str = NotificationType.SYSTEM_ALERT,
    ) -> Notification:
        """Queue a test notification to check the pipeline end to end."""
        label = notification_type.replace("_", " ").upper()
        return await self.create_and_queue(
            NotificationData(
                type=notification_type,
                title=f"Demo Notification - {label}",
                message=(
                    f"This is a test notification for {user_name}. "
                    "The notification system is working correctly!"
                ),
                recipient_id=user_id,
                recipient_email=user_email,
                recipient_name=user_name,
                priority=NotificationPriority.MEDIUM,
                channels=[NotificationChannel.EMAIL, NotificationChannel.BROWSER],
                metadata={"demo": True, "timestamp": isoformat(utcnow())},
            )
        )
