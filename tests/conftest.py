"""Pytest configuration and fixtures."""

import asyncio

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.deps import get_processor
from app.domain.services.notification_processor import NotificationProcessor
from app.domain.services.notification_queue import NotificationQueueService
from app.domain.templates.resolver import TemplateResolver
from app.infrastructure.channels.base import ChannelSender, SendResult
from app.infrastructure.channels.browser import BrowserSender
from app.persistence.database import Base, get_db
from app.persistence.models import *  # noqa: F401, F403


class RecordingSender(ChannelSender):
    """Channel sender that records calls and replays queued results.

    Once ``results`` is exhausted every send succeeds. With ``gate`` set,
    each send waits on it before returning.
    """

    def __init__(self, channel: str, results=None, gate: asyncio.Event | None = None):
        self.channel = channel
        self.results = list(results or [])
        self.gate = gate
        self.calls = []
        self.started = asyncio.Event()

    async def send(self, destination, payload):
        self.calls.append((destination, payload))
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return SendResult(success=True, provider_message_id=f"{self.channel}-{len(self.calls)}")


@pytest.fixture
async def session_factory(tmp_path):
    """Create a session factory over a throwaway SQLite database.

    A file database gives every session its own connection, like the
    processor's sessions in production.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'notifications.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def queue(db_session):
    return NotificationQueueService(db_session, max_attempts=3)


@pytest.fixture
def senders():
    """Senders for every implemented channel; email and WhatsApp record calls."""
    return {
        "email": RecordingSender("email"),
        "whatsapp": RecordingSender("whatsapp"),
        "browser": BrowserSender(),
    }


@pytest.fixture
async def processor(session_factory, senders):
    """Create a processor bound to the test database."""
    processor = NotificationProcessor(
        session_factory=session_factory,
        senders=senders,
        resolver=TemplateResolver("KnotSync"),
        page_size=100,
        max_attempts=3,
        default_interval_ms=30000,
    )
    yield processor
    await processor.shutdown()


@pytest.fixture
async def client(session_factory, processor):
    """Create a test HTTP client for the FastAPI app.

    The ASGI transport does not run the lifespan, so the periodic
    processor is never auto-started.
    """
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_processor] = lambda: processor

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()
