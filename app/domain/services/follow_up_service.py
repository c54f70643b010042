"""Follow-up reminder service: reminder lifecycle and conversion into notifications."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import to_naive_utc, utcnow
from app.core.exceptions import NotFoundError, ValidationError
from app.domain.services.notification_queue import NotificationQueueService
from app.persistence.models.follow_up_reminder import FollowUpReminder, FollowUpStatus
from app.persistence.models.notification import NotificationPriority
from app.persistence.repositories.follow_up_reminder_repository import FollowUpReminderRepository

logger = logging.getLogger(__name__)

REMINDER_PRIORITIES = (
    NotificationPriority.LOW,
    NotificationPriority.MEDIUM,
    NotificationPriority.HIGH,
)


@dataclass
class CreateFollowUpReminderData:
    """Input for creating a follow-up reminder."""

    customer_id: str
    customer_name: str
    created_by: str
    created_by_name: str
    title: str
    scheduled_for: datetime
    description: str = ""
    priority: str = NotificationPriority.MEDIUM
    created_by_email: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    tenant_id: str | None = None


class FollowUpReminderService:
    """Service for follow-up reminders."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize follow-up reminder service."""
        self.session = session
        self.reminder_repo = FollowUpReminderRepository(session)

    async def create_reminder(self, data: CreateFollowUpReminderData) -> FollowUpReminder:
        """Create a pending reminder.

        Raises:
            ValidationError: If required fields are missing or malformed
        """
        for name in ("customer_id", "customer_name", "created_by", "created_by_name", "title"):
            value = getattr(data, name)
            if not value or not str(value).strip():
                raise ValidationError(f"{name} is required")
        if data.priority not in REMINDER_PRIORITIES:
            raise ValidationError(
                f"priority must be one of {', '.join(REMINDER_PRIORITIES)}",
                {"priority": data.priority},
            )

        reminder = await self.reminder_repo.create(
            tenant_id=data.tenant_id,
            customer_id=data.customer_id,
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
            created_by=data.created_by,
            created_by_name=data.created_by_name,
            created_by_email=data.created_by_email,
            title=data.title,
            description=data.description or "",
            scheduled_for=to_naive_utc(data.scheduled_for),
            priority=data.priority,
            status=FollowUpStatus.PENDING,
            notification_sent=False,
        )
        logger.info(f"Created follow-up reminder {reminder.id} for customer {reminder.customer_id}")
        return reminder

    async def list_reminders(
        self,
        created_by: str | None = None,
        customer_id: str | None = None,
    ) -> list[FollowUpReminder]:
        return await self.reminder_repo.list_reminders(created_by=created_by, customer_id=customer_id)

    async def get_due_reminders(self, now: datetime | None = None) -> list[FollowUpReminder]:
        return await self.reminder_repo.find_due(now)

    async def update_status(
        self,
        reminder_id: str,
        status: str,
        completed_by: str | None = None,
    ) -> FollowUpReminder:
        """Change a reminder's status.

        Raises:
            ValidationError: If the status is unknown
            NotFoundError: If the reminder does not exist
        """
        if status not in FollowUpStatus.ALL:
            raise ValidationError(
                f"status must be one of {', '.join(FollowUpStatus.ALL)}",
                {"status": status},
            )
        reminder = await self.reminder_repo.update_status(reminder_id, status, completed_by)
        if reminder is None:
            raise NotFoundError("Reminder not found", {"id": reminder_id})
        return reminder

    async def delete_reminder(self, reminder_id: str) -> None:
        if not await self.reminder_repo.delete(reminder_id):
            raise NotFoundError("Reminder not found", {"id": reminder_id})

    async def mark_notification_sent(
        self,
        reminder_id: str,
        notification_id: str | None = None,
    ) -> bool:
        """Close a reminder's notification gate.

        Raises:
            NotFoundError: If the reminder does not exist
        """
        if await self.reminder_repo.get_by_id(reminder_id) is None:
            raise NotFoundError("Reminder not found", {"id": reminder_id})
        return await self.reminder_repo.mark_notification_sent(reminder_id, notification_id)

    async def mark_overdue_reminders(self, now: datetime | None = None) -> int:
        count = await self.reminder_repo.mark_overdue(now)
        if count:
            logger.info(f"Marked {count} follow-up reminders as overdue")
        return count

    async def convert_due_reminders(
        self,
        queue: NotificationQueueService,
        now: datetime | None = None,
    ) -> int:
        """Queue one notification per due reminder and close its gate.

        A reminder whose gate was closed concurrently keeps the first
        notification; the one created here is discarded. A reminder that
        cannot be turned into a notification has its gate closed without
        one, so it is reported once instead of on every pass.

        Returns:
            Number of notifications queued
        """
        due = await self.reminder_repo.find_due(now or utcnow())
        converted = 0

        for reminder in due:
            if not reminder.created_by_email:
                await self._close_without_notification(
                    reminder, f"no owner email, cannot notify {reminder.created_by}"
                )
                continue

            try:
                notification = await queue.create_follow_up_reminder_notification(
                    employee_id=reminder.created_by,
                    employee_name=reminder.created_by_name,
                    employee_email=reminder.created_by_email,
                    customer_id=reminder.customer_id,
                    customer_name=reminder.customer_name,
                    reminder_id=reminder.id,
                    reminder_title=reminder.title,
                    reminder_description=reminder.description,
                    scheduled_for=reminder.scheduled_for,
                    customer_email=reminder.customer_email,
                    customer_phone=reminder.customer_phone,
                    tenant_id=reminder.tenant_id,
                )
            except ValidationError as e:
                await self._close_without_notification(reminder, f"cannot be converted: {e.message}")
                continue

            if await self.reminder_repo.mark_notification_sent(reminder.id, notification.id):
                converted += 1
                logger.info(f"Queued notification {notification.id} for follow-up reminder {reminder.id}")
            else:
                logger.info(f"Follow-up reminder {reminder.id} already notified, discarding {notification.id}")
                await queue.notification_repo.delete(notification.id)

        return converted

    async def _close_without_notification(self, reminder: FollowUpReminder, reason: str) -> None:
        if await self.reminder_repo.mark_notification_sent(reminder.id):
            logger.warning(f"Follow-up reminder {reminder.id} {reason}")
