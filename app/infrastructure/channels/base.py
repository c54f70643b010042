"""Base channel sender interfaces and rendered payload types."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class EmailPayload:
    """Rendered email content."""

    subject: str
    html: str
    text: str


@dataclass
class TextPayload:
    """Rendered plain-text chat message."""

    body: str


@dataclass
class BrowserPayload:
    """In-app notification shown by the recipient's open client session."""

    notification_id: str
    title: str
    message: str
    priority: str
    relative_time: str


@dataclass
class SendResult:
    """Result of a channel send operation."""

    success: bool
    provider_message_id: str | None = None
    error: str | None = None


@dataclass
class ConfigCheckResult:
    """Result of a provider configuration check."""

    success: bool
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


def simulated_message_id(prefix: str = "simulated") -> str:
    """Synthetic provider id, ``<prefix>-<epoch ms>``."""
    return f"{prefix}-{int(time.time() * 1000)}"


class ChannelSender(ABC):
    """Protocol for channel sender implementations.

    ``send`` never raises: every failure is reported as
    ``SendResult(success=False, error=...)``.
    """

    channel: str

    @abstractmethod
    async def send(self, destination: str | None, payload: Any) -> SendResult:
        """Deliver a rendered payload.

        Args:
            destination: Channel address (email, phone) or None for browser
            payload: Rendered payload matching the channel

        Returns:
            SendResult with provider message id or error
        """
        pass


async def send_with_retries(
    attempt: Callable[[], Awaitable[SendResult]],
    *,
    channel: str,
    destination: str | None,
    retries: int = 3,
    base_delay: float = 1.0,
    sleep: Sleep = asyncio.sleep,
) -> SendResult:
    """Run a single send up to ``retries`` times with exponential backoff.

    Waits ``base_delay * 2 ** (n - 1)`` seconds after the n-th failed try.
    Exceptions raised by ``attempt`` count as failed tries.
    """
    last_error = "Max retries exceeded"
    for attempt_number in range(1, retries + 1):
        try:
            result = await attempt()
        except Exception as e:
            result = SendResult(success=False, error=str(e) or type(e).__name__)

        if result.success:
            if attempt_number > 1:
                logger.info(f"{channel} send to {destination} succeeded on attempt {attempt_number}")
            return result

        last_error = result.error or last_error
        logger.warning(
            f"{channel} attempt {attempt_number}/{retries} to {destination} failed: {last_error}"
        )
        if attempt_number < retries:
            await sleep(base_delay * 2 ** (attempt_number - 1))

    return SendResult(success=False, error=last_error)
