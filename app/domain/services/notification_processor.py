"""Notification processor: polls pending notifications and delivers them per channel."""

import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.clock import Clock, utcnow
from app.core.exceptions import ChannelDeliveryError, NotificationServiceError
from app.core.request_context import set_notification_context, set_tenant_context
from app.domain.services.follow_up_service import FollowUpReminderService
from app.domain.services.notification_queue import NotificationQueueService
from app.domain.templates.resolver import TemplateResolver
from app.infrastructure.channels.base import ChannelSender, SendResult
from app.infrastructure.channels.factory import ChannelSenderFactory
from app.persistence.models.notification import (
    Notification,
    NotificationChannel,
    NotificationStatus,
)
from app.persistence.repositories.notification_repository import NotificationRepository
from app.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class ProcessingSummary:
    """Outcome of one processing pass."""

    processed: int = 0
    sent: int = 0
    failed: int = 0
    pending: int = 0
    reminders_converted: int = 0
    skipped: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class NotificationProcessor:
    """Delivers pending notifications on a polling schedule.

    One instance is created by the application at startup and shared with
    the HTTP handlers. Ticks never overlap: a tick requested while another
    is running returns immediately with ``skipped=True``.

    Per record, each requested channel that is not yet sent is rendered and
    handed to its sender. Successes set the channel flag, failures consume
    one shared attempt. The record becomes ``sent`` once every requested
    channel is sent or has nothing to deliver (no template or no sender),
    and ``failed`` once its attempts are exhausted.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        senders: dict[str, ChannelSender],
        resolver: TemplateResolver | None = None,
        clock: Clock = utcnow,
        page_size: int | None = None,
        max_attempts: int | None = None,
        default_interval_ms: int | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.senders = senders
        self.resolver = resolver or TemplateResolver(settings.company_name, clock=clock)
        self.clock = clock
        self.page_size = page_size or settings.notification_page_size
        self.max_attempts = max_attempts or settings.notification_max_attempts
        self.default_interval_ms = default_interval_ms or settings.notification_poll_interval_ms

        self._is_processing = False
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None
        self._stopping: set[asyncio.Task] = set()
        self.interval_ms: int | None = None

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def status(self) -> dict[str, Any]:
        return {
            "running": self.is_running,
            "isProcessing": self._is_processing,
            "intervalMs": self.interval_ms if self.is_running else None,
        }

    def start(self, interval_ms: int | None = None) -> int:
        """Start the polling loop, replacing any loop already running.

        The first tick runs immediately. A tick already in flight from a
        replaced loop is allowed to finish; ticks of the new loop are
        skipped until it has. Must be called from a running event loop.

        Returns:
            The interval in milliseconds
        """
        interval_ms = interval_ms or self.default_interval_ms
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")

        if self._task is not None:
            self.stop()

        self.interval_ms = interval_ms
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(interval_ms / 1000, self._stop_event))
        logger.info(f"Notification processor started with {interval_ms}ms interval")
        return interval_ms

    def stop(self) -> bool:
        """Stop the polling loop after its current tick.

        Only the wait between ticks is interrupted, so sends in flight are
        recorded before the loop exits.

        Returns:
            True if a loop was running
        """
        if self._task is None:
            return False

        self._stop_event.set()
        self._stopping.add(self._task)
        self._task.add_done_callback(self._stopping.discard)
        self._task = None
        self._stop_event = None
        self.interval_ms = None
        logger.info("Notification processor stopped")
        return True

    async def shutdown(self) -> None:
        """Stop the loop and wait for any tick still in flight."""
        self.stop()
        if self._stopping:
            await asyncio.gather(*self._stopping, return_exceptions=True)

    async def _run(self, interval_seconds: float, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await self.process_notifications()
            except Exception as e:
                logger.error(f"Notification processing tick failed: {e}", exc_info=True)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
            except asyncio.TimeoutError:
                pass

    async def process_notifications(self) -> ProcessingSummary:
        """Run one processing pass.

        Raises:
            StorageError: If pending notifications cannot be fetched
        """
        if self._is_processing:
            logger.info("Notification processing already in progress, skipping")
            return ProcessingSummary(skipped=True)

        self._is_processing = True
        summary = ProcessingSummary()
        try:
            async with self.session_factory() as session:
                now = self.clock()
                summary.reminders_converted = await self._convert_due_reminders(session, now)

                repo = NotificationRepository(session, page_size=self.page_size)
                pending = await repo.find_pending(now)
                if not pending:
                    logger.debug("No pending notifications")
                    return summary

                logger.info(f"Processing {len(pending)} notifications")
                sender_factory = ChannelSenderFactory(session, self.senders)

                for notification in pending:
                    summary.processed += 1
                    set_notification_context(notification.id)
                    set_tenant_context(notification.tenant_id)
                    try:
                        outcome = await self._process_notification(repo, sender_factory, notification)
                    except Exception as e:
                        logger.error(
                            f"Error processing notification {notification.id}: {e}",
                            exc_info=True,
                        )
                        outcome = NotificationStatus.PENDING
                    finally:
                        set_notification_context(None)
                        set_tenant_context(None)

                    if outcome == NotificationStatus.SENT:
                        summary.sent += 1
                    elif outcome == NotificationStatus.FAILED:
                        summary.failed += 1
                    else:
                        summary.pending += 1

            logger.info(
                f"Processed {summary.processed} notifications: {summary.sent} sent, "
                f"{summary.failed} failed, {summary.pending} pending"
            )
            return summary
        finally:
            self._is_processing = False

    async def _convert_due_reminders(self, session: AsyncSession, now: datetime) -> int:
        reminder_service = FollowUpReminderService(session)
        queue = NotificationQueueService(session, max_attempts=self.max_attempts)
        try:
            return await reminder_service.convert_due_reminders(queue, now)
        except NotificationServiceError as e:
            logger.error(f"Failed to convert due follow-up reminders: {e.message}")
            return 0

    async def _process_notification(
        self,
        repo: NotificationRepository,
        sender_factory: ChannelSenderFactory,
        notification: Notification,
    ) -> str:
        """Attempt every unsent channel of one notification, then roll up its status.

        Returns:
            The record status after this pass
        """
        logger.info(f"Processing notification {notification.id} of type {notification.type}")
        attempts = notification.attempts

        for channel in notification.channels:
            if notification.is_channel_sent(channel):
                continue
            if attempts >= notification.max_attempts:
                break

            try:
                result = await self._deliver(sender_factory, notification, channel)
            except Exception as e:
                logger.error(
                    f"Error delivering {channel} for notification {notification.id}: {e}",
                    exc_info=True,
                )
                result = SendResult(success=False, error=str(e) or type(e).__name__)
            if result is None:
                continue

            if result.success:
                await repo.update_status(notification.id, NotificationStatus.SENT, channel)
                logger.info(f"{channel} sent for notification {notification.id}")
            else:
                attempts += 1
                await self._record_failure(
                    repo,
                    notification.id,
                    ChannelDeliveryError(channel, result.error or "Unknown error"),
                )

        current = await repo.get_by_id(notification.id)
        if current is None:
            return NotificationStatus.PENDING

        if all(self._is_channel_complete(current, channel) for channel in current.channels):
            await repo.update_status(current.id, NotificationStatus.SENT)
            logger.info(f"All channels completed for notification {current.id}")
            return NotificationStatus.SENT

        if current.is_exhausted and await repo.mark_failed_if_exhausted(current.id):
            logger.warning(
                f"Notification {current.id} failed after {current.attempts} attempts"
            )
            return NotificationStatus.FAILED

        return current.status

    async def _deliver(
        self,
        sender_factory: ChannelSenderFactory,
        notification: Notification,
        channel: str,
    ) -> SendResult | None:
        """Render and send one channel; None when there is nothing to deliver."""
        payload = self.resolver.render(notification, channel)
        if payload is None:
            return None

        sender = await sender_factory.get_sender(channel, notification.tenant_id)
        if sender is None:
            logger.warning(f"No sender for channel {channel}, skipping for notification {notification.id}")
            return None

        return await sender.send(self._destination(notification, channel), payload)

    async def _record_failure(
        self,
        repo: NotificationRepository,
        notification_id: str,
        failure: ChannelDeliveryError,
    ) -> None:
        await repo.update_status(
            notification_id,
            NotificationStatus.FAILED,
            failure.channel,
            error_message=failure.message,
        )
        logger.error(f"{failure.channel} failed for notification {notification_id}: {failure.message}")

    def _is_channel_complete(self, notification: Notification, channel: str) -> bool:
        """Sent, or nothing to deliver on this channel for this type."""
        if notification.is_channel_sent(channel):
            return True
        if channel not in self.senders:
            return True
        return not self.resolver.has_template(notification.type, channel)

    @staticmethod
    def _destination(notification: Notification, channel: str) -> str | None:
        if channel == NotificationChannel.EMAIL:
            return notification.recipient_email
        if channel == NotificationChannel.WHATSAPP:
            return notification.recipient_phone
        return notification.recipient_id

    async def cleanup(self, days: int | None = None) -> int:
        """Delete terminal notifications older than the retention period."""
        days = days if days is not None else settings.notification_retention_days
        async with self.session_factory() as session:
            repo = NotificationRepository(session)
            deleted = await repo.purge_older_than(days)
        logger.info(f"Deleted {deleted} notifications older than {days} days")
        return deleted
