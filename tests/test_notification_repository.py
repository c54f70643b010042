"""Tests for the notification repository."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError

from app.core.clock import utcnow
from app.core.exceptions import StorageError
from app.persistence.models.notification import Notification, NotificationError
from app.persistence.repositories.notification_repository import NotificationRepository


def _notification_data(**overrides):
    data = {
        "type": "system_alert",
        "title": "Heads up",
        "message": "Something happened",
        "recipient_id": "user_1",
        "recipient_email": "user@example.com",
        "recipient_name": "Test User",
        "channels": ["email", "browser"],
        "status": "pending",
        "attempts": 0,
        "max_attempts": 3,
        "extra_data": {},
    }
    data.update(overrides)
    return data


async def _error_count(session, notification_id):
    result = await session.execute(
        select(func.count())
        .select_from(NotificationError)
        .where(NotificationError.notification_id == notification_id)
    )
    return result.scalar_one()


@pytest.mark.asyncio
async def test_insert_assigns_id(db_session):
    """Test that inserted notifications get an id and pending defaults."""
    repo = NotificationRepository(db_session)
    notification = await repo.insert(**_notification_data())

    assert notification.id.startswith("ntf_")
    assert notification.status == "pending"
    assert notification.email_sent is False
    assert notification.created_at is not None


@pytest.mark.asyncio
async def test_find_pending_skips_future_and_terminal(db_session):
    """Test that only due, pending notifications with attempts left are returned."""
    repo = NotificationRepository(db_session)
    due = await repo.insert(**_notification_data(title="due"))
    await repo.insert(**_notification_data(title="later", scheduled_for=utcnow() + timedelta(hours=1)))
    await repo.insert(**_notification_data(title="done", status="sent"))
    await repo.insert(**_notification_data(title="spent", attempts=3))
    past = await repo.insert(**_notification_data(title="past", scheduled_for=utcnow() - timedelta(minutes=5)))

    pending = await repo.find_pending()

    assert [n.id for n in pending] == [due.id, past.id]


@pytest.mark.asyncio
async def test_find_pending_respects_page_size(db_session):
    repo = NotificationRepository(db_session, page_size=2)
    for i in range(3):
        await repo.insert(**_notification_data(title=f"n{i}"))

    assert len(await repo.find_pending()) == 2


@pytest.mark.asyncio
async def test_failed_attempts_are_capped(db_session):
    """Test that attempts never exceed max_attempts and exhausted records leave the queue."""
    repo = NotificationRepository(db_session)
    notification = await repo.insert(**_notification_data())

    for i in range(5):
        await repo.update_status(notification.id, "failed", "email", error_message=f"boom {i}")

    current = await repo.get_by_id(notification.id)
    assert current.attempts == 3
    assert current.status == "pending"
    assert await _error_count(db_session, notification.id) == 5
    assert await repo.find_pending() == []


@pytest.mark.asyncio
async def test_channel_flags_never_revert(db_session):
    """Test that a sent channel stays sent and keeps its first timestamp."""
    repo = NotificationRepository(db_session)
    notification = await repo.insert(**_notification_data())

    assert await repo.update_status(notification.id, "sent", "email") is True
    first = await repo.get_by_id(notification.id)
    first_sent_at = first.email_sent_at
    assert first.email_sent is True
    assert first_sent_at is not None
    # Channel success leaves the record status alone
    assert first.status == "pending"

    await repo.update_status(notification.id, "sent", "email")
    await repo.update_status(notification.id, "failed", "email", error_message="late failure")

    current = await repo.get_by_id(notification.id)
    assert current.email_sent is True
    assert current.email_sent_at == first_sent_at
    assert current.attempts == 1


@pytest.mark.asyncio
async def test_record_status_only_moves_forward(db_session):
    """Test that a terminal record status cannot be changed."""
    repo = NotificationRepository(db_session)
    notification = await repo.insert(**_notification_data())

    assert await repo.update_status(notification.id, "sent") is True
    assert await repo.update_status(notification.id, "failed") is False

    current = await repo.get_by_id(notification.id)
    assert current.status == "sent"
    assert current.sent_at is not None


@pytest.mark.asyncio
async def test_update_status_unknown_notification(db_session):
    repo = NotificationRepository(db_session)
    assert await repo.update_status("ntf_missing", "failed", "email", error_message="x") is False
    assert await _error_count(db_session, "ntf_missing") == 0


@pytest.mark.asyncio
async def test_update_status_rejects_unknown_channel(db_session):
    repo = NotificationRepository(db_session)
    notification = await repo.insert(**_notification_data())

    with pytest.raises(ValueError):
        await repo.update_status(notification.id, "sent", "pigeon")


@pytest.mark.asyncio
async def test_mark_failed_if_exhausted(db_session):
    """Test that only exhausted pending records move to failed."""
    repo = NotificationRepository(db_session)
    fresh = await repo.insert(**_notification_data())
    spent = await repo.insert(**_notification_data(attempts=3))

    assert await repo.mark_failed_if_exhausted(fresh.id) is False
    assert await repo.mark_failed_if_exhausted(spent.id) is True
    assert (await repo.get_by_id(spent.id)).status == "failed"


@pytest.mark.asyncio
async def test_read_acknowledgements(db_session):
    """Test marking notifications read and counting unread ones."""
    repo = NotificationRepository(db_session)
    first = await repo.insert(**_notification_data())
    await repo.insert(**_notification_data())
    await repo.insert(**_notification_data())
    await repo.insert(**_notification_data(recipient_id="someone_else"))

    assert await repo.count_unread("user_1") == 3

    assert await repo.mark_read(first.id) is True
    assert await repo.count_unread("user_1") == 2
    assert (await repo.get_by_id(first.id)).read_at is not None

    assert await repo.mark_all_read("user_1") == 2
    assert await repo.count_unread("user_1") == 0
    assert await repo.count_unread("someone_else") == 1

    assert await repo.mark_read("ntf_missing") is False


@pytest.mark.asyncio
async def test_find_by_recipient_newest_first(db_session):
    repo = NotificationRepository(db_session)
    older = await repo.insert(**_notification_data(created_at=utcnow() - timedelta(hours=1)))
    newer = await repo.insert(**_notification_data())

    notifications = await repo.find_by_recipient("user_1", limit=10)

    assert [n.id for n in notifications] == [newer.id, older.id]


@pytest.mark.asyncio
async def test_purge_older_than(db_session):
    """Test that only old terminal notifications are deleted, with their errors."""
    repo = NotificationRepository(db_session)
    old_sent = await repo.insert(**_notification_data())
    old_pending = await repo.insert(**_notification_data())
    recent_sent = await repo.insert(**_notification_data())
    await repo.update_status(old_sent.id, "failed", "email", error_message="boom")

    long_ago = utcnow() - timedelta(days=40)
    await db_session.execute(
        update(Notification)
        .where(Notification.id.in_([old_sent.id, old_pending.id]))
        .values(created_at=long_ago)
    )
    await db_session.execute(
        update(Notification)
        .where(Notification.id.in_([old_sent.id, recent_sent.id]))
        .values(status="sent")
    )
    await db_session.commit()

    assert await repo.purge_older_than(30) == 1
    assert await repo.get_by_id(old_sent.id) is None
    assert await repo.get_by_id(old_pending.id) is not None
    assert await repo.get_by_id(recent_sent.id) is not None
    assert await _error_count(db_session, old_sent.id) == 0


@pytest.mark.asyncio
async def test_storage_failures_become_storage_errors(db_session):
    """Test that database errors are translated and the session rolled back."""
    repo = NotificationRepository(db_session)
    failure = OperationalError("SELECT 1", {}, Exception("database is locked"))

    with patch.object(db_session, "execute", AsyncMock(side_effect=failure)):
        with patch.object(db_session, "rollback", AsyncMock()) as mock_rollback:
            with pytest.raises(StorageError):
                await repo.find_pending()

    mock_rollback.assert_awaited_once()
