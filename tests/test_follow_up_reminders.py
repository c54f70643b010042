"""Tests for follow-up reminders and their conversion into notifications."""

import logging
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select

from app.core.clock import utcnow
from app.core.exceptions import NotFoundError, ValidationError
from app.domain.services.follow_up_service import (
    CreateFollowUpReminderData,
    FollowUpReminderService,
)
from app.persistence.models.notification import Notification


def _reminder_data(**overrides):
    data = {
        "customer_id": "cust_1",
        "customer_name": "Acme Corp",
        "created_by": "emp_1",
        "created_by_name": "Sam",
        "created_by_email": "sam@example.com",
        "title": "Quarterly check-in",
        "description": "Discuss renewal",
        "scheduled_for": utcnow() - timedelta(minutes=1),
        "customer_phone": "+12817882316",
    }
    data.update(overrides)
    return CreateFollowUpReminderData(**data)


async def _notifications(session_factory):
    async with session_factory() as session:
        result = await session.execute(select(Notification))
        return list(result.scalars().all())


@pytest.fixture
def reminder_service(db_session):
    return FollowUpReminderService(db_session)


class TestReminderLifecycle:
    """Tests for reminder CRUD and status changes."""

    @pytest.mark.asyncio
    async def test_create_reminder(self, reminder_service):
        reminder = await reminder_service.create_reminder(_reminder_data())

        assert reminder.id.startswith("rem_")
        assert reminder.status == "pending"
        assert reminder.priority == "medium"
        assert reminder.notification_sent is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [{"title": ""}, {"customer_id": " "}, {"priority": "urgent"}])
    async def test_create_reminder_validation(self, reminder_service, overrides):
        with pytest.raises(ValidationError):
            await reminder_service.create_reminder(_reminder_data(**overrides))

    @pytest.mark.asyncio
    async def test_list_reminders_filters_and_orders(self, reminder_service):
        later = await reminder_service.create_reminder(
            _reminder_data(scheduled_for=utcnow() + timedelta(days=2))
        )
        sooner = await reminder_service.create_reminder(
            _reminder_data(scheduled_for=utcnow() + timedelta(days=1))
        )
        await reminder_service.create_reminder(_reminder_data(created_by="emp_2"))

        reminders = await reminder_service.list_reminders(created_by="emp_1")

        assert [r.id for r in reminders] == [sooner.id, later.id]

    @pytest.mark.asyncio
    async def test_complete_reminder(self, reminder_service):
        """Test that completing a reminder stamps who and when."""
        reminder = await reminder_service.create_reminder(_reminder_data())

        updated = await reminder_service.update_status(reminder.id, "completed", completed_by="emp_1")

        assert updated.status == "completed"
        assert updated.completed_by == "emp_1"
        assert updated.completed_at is not None
        assert await reminder_service.get_due_reminders() == []

    @pytest.mark.asyncio
    async def test_update_status_errors(self, reminder_service):
        reminder = await reminder_service.create_reminder(_reminder_data())

        with pytest.raises(ValidationError):
            await reminder_service.update_status(reminder.id, "snoozed")
        with pytest.raises(NotFoundError):
            await reminder_service.update_status("rem_missing", "cancelled")

    @pytest.mark.asyncio
    async def test_delete_reminder(self, reminder_service):
        reminder = await reminder_service.create_reminder(_reminder_data())

        await reminder_service.delete_reminder(reminder.id)

        assert await reminder_service.list_reminders() == []
        with pytest.raises(NotFoundError):
            await reminder_service.delete_reminder(reminder.id)

    @pytest.mark.asyncio
    async def test_mark_overdue(self, reminder_service):
        past = await reminder_service.create_reminder(_reminder_data())
        future = await reminder_service.create_reminder(
            _reminder_data(scheduled_for=utcnow() + timedelta(hours=1))
        )

        assert await reminder_service.mark_overdue_reminders() == 1

        reminders = {r.id: r.status for r in await reminder_service.list_reminders()}
        assert reminders == {past.id: "overdue", future.id: "pending"}

    @pytest.mark.asyncio
    async def test_notification_gate_closes_once(self, reminder_service):
        reminder = await reminder_service.create_reminder(_reminder_data())

        assert await reminder_service.mark_notification_sent(reminder.id, "ntf_1") is True
        assert await reminder_service.mark_notification_sent(reminder.id, "ntf_2") is False

        (stored,) = await reminder_service.list_reminders()
        assert stored.notification_sent is True
        assert stored.notification_id == "ntf_1"
        assert stored.notification_sent_at is not None

        with pytest.raises(NotFoundError):
            await reminder_service.mark_notification_sent("rem_missing")


class TestReminderConversion:
    """Tests for turning due reminders into notifications."""

    @pytest.mark.asyncio
    async def test_due_reminder_converted_exactly_once(self, processor, session_factory, reminder_service):
        """Test that a due reminder yields one notification across ticks."""
        reminder = await reminder_service.create_reminder(_reminder_data())

        first = await processor.process_notifications()
        second = await processor.process_notifications()

        assert first.reminders_converted == 1
        assert second.reminders_converted == 0
        notifications = await _notifications(session_factory)
        assert len(notifications) == 1
        notification = notifications[0]
        assert notification.type == "follow_up_reminder"
        assert notification.reminder_id == reminder.id
        assert notification.recipient_email == "sam@example.com"
        assert notification.status == "sent"

        (stored,) = await reminder_service.list_reminders()
        assert stored.notification_sent is True
        assert stored.notification_id == notification.id
        assert await reminder_service.get_due_reminders() == []

    @pytest.mark.asyncio
    async def test_future_reminder_is_not_converted(self, processor, session_factory, reminder_service):
        await reminder_service.create_reminder(
            _reminder_data(scheduled_for=utcnow() + timedelta(hours=1))
        )

        summary = await processor.process_notifications()

        assert summary.reminders_converted == 0
        assert await _notifications(session_factory) == []

    @pytest.mark.asyncio
    async def test_reminder_without_owner_email_is_reported_once(
        self, processor, session_factory, reminder_service, caplog
    ):
        """Test that an unnotifiable reminder closes its gate and is not retried every tick."""
        reminder = await reminder_service.create_reminder(_reminder_data(created_by_email=None))

        with caplog.at_level(logging.WARNING, logger="app.domain.services.follow_up_service"):
            first = await processor.process_notifications()
            second = await processor.process_notifications()

        assert first.reminders_converted == 0
        assert second.reminders_converted == 0
        assert await _notifications(session_factory) == []
        assert await reminder_service.get_due_reminders() == []
        warnings = [r.getMessage() for r in caplog.records if reminder.id in r.getMessage()]
        assert len(warnings) == 1
        assert "no owner email" in warnings[0]

        (stored,) = await reminder_service.list_reminders()
        assert stored.status == "pending"
        assert stored.notification_sent is True
        assert stored.notification_id is None

    @pytest.mark.asyncio
    async def test_concurrent_conversion_discards_duplicate(self, db_session, session_factory, queue, reminder_service):
        """Test that losing the gate race deletes the notification just created."""
        await reminder_service.create_reminder(_reminder_data())

        with patch.object(
            reminder_service.reminder_repo,
            "mark_notification_sent",
            AsyncMock(return_value=False),
        ):
            converted = await reminder_service.convert_due_reminders(queue)

        assert converted == 0
        assert await _notifications(session_factory) == []
