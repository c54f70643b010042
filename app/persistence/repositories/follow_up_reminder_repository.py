"""Follow-up reminder repository."""

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.persistence.models.follow_up_reminder import FollowUpReminder, FollowUpStatus
from app.persistence.repositories.base import BaseRepository, storage_operation


class FollowUpReminderRepository(BaseRepository[FollowUpReminder]):
    """Repository for FollowUpReminder entities."""

    def __init__(self, session: AsyncSession):
        """Initialize follow-up reminder repository."""
        super().__init__(FollowUpReminder, session)

    @storage_operation
    async def list_reminders(
        self,
        created_by: str | None = None,
        customer_id: str | None = None,
    ) -> list[FollowUpReminder]:
        """List reminders ordered by schedule, optionally per owner and customer."""
        stmt = select(FollowUpReminder)
        if created_by:
            stmt = stmt.where(FollowUpReminder.created_by == created_by)
        if customer_id:
            stmt = stmt.where(FollowUpReminder.customer_id == customer_id)
        stmt = stmt.order_by(FollowUpReminder.scheduled_for.asc()).execution_options(
            populate_existing=True
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @storage_operation
    async def find_due(self, now: datetime | None = None) -> list[FollowUpReminder]:
        """Get pending reminders whose time has come and that have no notification yet."""
        now = now or utcnow()
        stmt = (
            select(FollowUpReminder)
            .where(
                FollowUpReminder.status == FollowUpStatus.PENDING,
                FollowUpReminder.scheduled_for <= now,
                FollowUpReminder.notification_sent.is_(False),
            )
            .order_by(FollowUpReminder.scheduled_for.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @storage_operation
    async def update_status(
        self,
        reminder_id: str,
        status: str,
        completed_by: str | None = None,
    ) -> FollowUpReminder | None:
        """Set a reminder's status; completing it stamps completion details."""
        now = utcnow()
        values: dict[str, Any] = {"status": status, "updated_at": now}
        if status == FollowUpStatus.COMPLETED:
            values["completed_at"] = now
            if completed_by:
                values["completed_by"] = completed_by

        stmt = (
            update(FollowUpReminder)
            .where(FollowUpReminder.id == reminder_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        if result.rowcount == 0:
            return None
        return await self.get_by_id(reminder_id)

    @storage_operation
    async def mark_overdue(self, now: datetime | None = None) -> int:
        """Flip every past-due pending reminder to overdue.

        Returns:
            Number of reminders updated
        """
        now = now or utcnow()
        stmt = (
            update(FollowUpReminder)
            .where(
                FollowUpReminder.status == FollowUpStatus.PENDING,
                FollowUpReminder.scheduled_for < now,
            )
            .values(status=FollowUpStatus.OVERDUE, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    @storage_operation
    async def mark_notification_sent(
        self,
        reminder_id: str,
        notification_id: str | None = None,
    ) -> bool:
        """Close the notification gate of a reminder.

        The update only matches while the gate is still open, so a reminder
        yields at most one notification.

        Returns:
            True if this call closed the gate
        """
        now = utcnow()
        stmt = (
            update(FollowUpReminder)
            .where(
                FollowUpReminder.id == reminder_id,
                FollowUpReminder.notification_sent.is_(False),
            )
            .values(
                notification_sent=True,
                notification_sent_at=now,
                notification_id=notification_id,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0
