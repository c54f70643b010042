"""Notification record store."""

from datetime import datetime, timedelta
from typing import Any, Iterable

from sqlalchemy import case, delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.persistence.models.notification import (
    Notification,
    NotificationChannel,
    NotificationError,
    NotificationStatus,
)
from app.persistence.repositories.base import BaseRepository, storage_operation

DEFAULT_PAGE_SIZE = 100


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification records.

    All status mutations are issued as single UPDATE statements with column
    expressions so a concurrent tick and a manual trigger cannot lose each
    other's writes.
    """

    def __init__(self, session: AsyncSession, page_size: int = DEFAULT_PAGE_SIZE):
        """Initialize notification repository."""
        super().__init__(Notification, session)
        self.page_size = page_size

    @storage_operation
    async def insert(self, **data: Any) -> Notification:
        """Persist a new notification and return it with its assigned id."""
        instance = Notification(**data)
        self.session.add(instance)
        await self.session.commit()
        return await self.get_by_id(instance.id)

    @storage_operation
    async def find_pending(self, now: datetime | None = None) -> list[Notification]:
        """Get due, unsent notifications that still have attempts left.

        Args:
            now: Reference time for scheduled notifications (defaults to utcnow)

        Returns:
            Up to ``page_size`` notifications, oldest first
        """
        now = now or utcnow()
        stmt = (
            select(Notification)
            .where(
                Notification.status == NotificationStatus.PENDING,
                Notification.attempts < Notification.max_attempts,
                or_(
                    Notification.scheduled_for.is_(None),
                    Notification.scheduled_for <= now,
                ),
            )
            .order_by(Notification.created_at.asc(), Notification.id.asc())
            .limit(self.page_size)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @storage_operation
    async def find_by_recipient(self, recipient_id: str, limit: int = 50) -> list[Notification]:
        """Get a recipient's notifications, newest first."""
        stmt = (
            select(Notification)
            .where(Notification.recipient_id == recipient_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @storage_operation
    async def count_unread(self, recipient_id: str) -> int:
        """Count a recipient's notifications without a read acknowledgement."""
        stmt = select(func.count()).select_from(Notification).where(
            Notification.recipient_id == recipient_id,
            Notification.read_at.is_(None),
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    @storage_operation
    async def mark_read(self, notification_id: str) -> bool:
        """Mark one notification as read.

        Returns:
            True if the notification exists and was updated
        """
        now = utcnow()
        stmt = (
            update(Notification)
            .where(Notification.id == notification_id)
            .values(read_at=func.coalesce(Notification.read_at, now), updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    @storage_operation
    async def mark_all_read(self, recipient_id: str) -> int:
        """Mark every unread notification of a recipient as read.

        Returns:
            Number of notifications updated
        """
        now = utcnow()
        stmt = (
            update(Notification)
            .where(
                Notification.recipient_id == recipient_id,
                Notification.read_at.is_(None),
            )
            .values(read_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    @storage_operation
    async def update_status(
        self,
        notification_id: str,
        status: str,
        channel: str | None = None,
        error_message: str | None = None,
    ) -> bool:
        """Record a delivery outcome.

        With ``channel`` the status describes that channel's attempt: ``sent``
        sets ``<channel>_sent`` and its timestamp, and the record status is left
        alone. Without ``channel`` the record status itself is set. An
        ``error_message`` is appended to the error log and consumes one
        attempt (never beyond ``max_attempts``).

        Returns:
            True if the update was applied
        """
        now = utcnow()
        values: dict[str, Any] = {"updated_at": now}
        conditions = [Notification.id == notification_id]

        if channel is None:
            # Record status only moves forward from pending
            conditions.append(Notification.status == NotificationStatus.PENDING)
            values["status"] = status
            if status == NotificationStatus.SENT:
                values["sent_at"] = now
        elif status == NotificationStatus.SENT:
            if channel not in NotificationChannel.ALL:
                raise ValueError(f"Unknown channel: {channel}")
            values[f"{channel}_sent"] = True
            values[f"{channel}_sent_at"] = func.coalesce(
                getattr(Notification, f"{channel}_sent_at"), now
            )

        if error_message:
            values["attempts"] = case(
                (Notification.attempts < Notification.max_attempts, Notification.attempts + 1),
                else_=Notification.attempts,
            )

        stmt = (
            update(Notification)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            await self.session.rollback()
            return False

        if error_message:
            await self.session.execute(
                insert(NotificationError).values(
                    notification_id=notification_id,
                    channel=channel,
                    message=error_message,
                    timestamp=now,
                )
            )

        await self.session.commit()
        return True

    @storage_operation
    async def mark_failed_if_exhausted(self, notification_id: str) -> bool:
        """Move a still-pending notification with no attempts left to ``failed``.

        Returns:
            True if the transition happened
        """
        stmt = (
            update(Notification)
            .where(
                Notification.id == notification_id,
                Notification.status == NotificationStatus.PENDING,
                Notification.attempts >= Notification.max_attempts,
            )
            .values(status=NotificationStatus.FAILED, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    @storage_operation
    async def purge_older_than(
        self,
        days: int,
        statuses: Iterable[str] = NotificationStatus.TERMINAL,
    ) -> int:
        """Delete terminal notifications created more than ``days`` ago.

        Returns:
            Number of notifications deleted
        """
        cutoff = utcnow() - timedelta(days=days)
        conditions = (
            Notification.created_at < cutoff,
            Notification.status.in_(list(statuses)),
        )
        expired_ids = select(Notification.id).where(*conditions)
        await self.session.execute(
            delete(NotificationError)
            .where(NotificationError.notification_id.in_(expired_ids))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(
            delete(Notification)
            .where(*conditions)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount
