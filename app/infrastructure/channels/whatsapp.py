"""UltraMsg WhatsApp sender."""

import asyncio
import logging
import time
from typing import Any

import httpx

from app.core.phone import validate_and_clean_phone_number
from app.infrastructure.channels.base import (
    ChannelSender,
    ConfigCheckResult,
    SendResult,
    Sleep,
    TextPayload,
    send_with_retries,
    simulated_message_id,
)
from app.settings import Settings

logger = logging.getLogger(__name__)

ULTRAMSG_API_BASE = "https://api.ultramsg.com"
ULTRAMSG_PRIORITY = "10"


class WhatsAppSender(ChannelSender):
    """WhatsApp sender backed by the UltraMsg HTTP API.

    Without an instance id and token the sender runs in simulated mode.
    Phone numbers are validated in both modes.
    """

    channel = "whatsapp"

    def __init__(
        self,
        instance_id: str | None,
        token: str | None,
        api_base: str = ULTRAMSG_API_BASE,
        timeout: float = 30.0,
        retries: int = 3,
        retry_base_delay: float = 1.0,
        sleep: Sleep = asyncio.sleep,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize WhatsApp sender.

        Args:
            instance_id: UltraMsg instance id
            token: UltraMsg API token
            api_base: UltraMsg API root URL
            timeout: HTTP timeout in seconds
            retries: Tries per send before reporting failure
            retry_base_delay: First backoff delay in seconds
            sleep: Awaitable used for backoff waits
            transport: Optional httpx transport (tests)
        """
        self.instance_id = instance_id
        self.token = token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.retries = retries
        self.retry_base_delay = retry_base_delay
        self.sleep = sleep
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, sleep: Sleep = asyncio.sleep) -> "WhatsAppSender":
        return cls(
            instance_id=settings.ultramsg_instance_id,
            token=settings.ultramsg_token,
            api_base=settings.ultramsg_api_base,
            timeout=settings.ultramsg_timeout_seconds,
            retries=settings.send_retries,
            retry_base_delay=settings.send_retry_base_delay_seconds,
            sleep=sleep,
        )

    def with_credentials(self, instance_id: str, token: str) -> "WhatsAppSender":
        """Copy of this sender using another UltraMsg instance."""
        return WhatsAppSender(
            instance_id=instance_id,
            token=token,
            api_base=self.api_base,
            timeout=self.timeout,
            retries=self.retries,
            retry_base_delay=self.retry_base_delay,
            sleep=self.sleep,
            transport=self.transport,
        )

    @property
    def simulated(self) -> bool:
        return not (self.instance_id and self.token)

    def _get_client(self) -> httpx.AsyncClient:
        """Create HTTP client scoped to the UltraMsg instance."""
        return httpx.AsyncClient(
            base_url=f"{self.api_base}/{self.instance_id}",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=self.timeout,
            transport=self.transport,
        )

    async def send(self, destination: str | None, payload: TextPayload) -> SendResult:
        """Send a WhatsApp chat message.

        Args:
            destination: Recipient phone number in any common format
            payload: Message text

        Returns:
            SendResult with the UltraMsg message id on success
        """
        phone = validate_and_clean_phone_number(destination)
        if not phone.is_valid:
            error = f"Invalid phone number format: {destination}"
            logger.error(error)
            return SendResult(success=False, error=error)

        logger.info(f"Sending WhatsApp message to {phone.clean_number}")

        if self.simulated:
            logger.info(
                "Simulating WhatsApp send (no UltraMsg credentials configured)",
                extra={"to": phone.clean_number, "content": payload.body},
            )
            return SendResult(success=True, provider_message_id=simulated_message_id())

        async def attempt() -> SendResult:
            return await self._post_message(phone.clean_number, payload.body)

        result = await send_with_retries(
            attempt,
            channel=self.channel,
            destination=phone.clean_number,
            retries=self.retries,
            base_delay=self.retry_base_delay,
            sleep=self.sleep,
        )
        if result.success:
            logger.info(f"WhatsApp sent to {phone.clean_number}, message id {result.provider_message_id}")
        else:
            logger.error(f"WhatsApp to {phone.clean_number} failed: {result.error}")
        return result

    async def _post_message(self, to: str, body: str) -> SendResult:
        form = {
            "token": self.token,
            "to": to,
            "body": body,
            "priority": ULTRAMSG_PRIORITY,
        }
        async with self._get_client() as client:
            response = await client.post("/messages/chat", data=form)
            response.raise_for_status()
            data: dict[str, Any] = response.json()

        logger.debug(f"UltraMsg response: {data}")

        if data.get("sent") in ("true", True):
            message_id = data.get("id") or f"ultramsg-{int(time.time() * 1000)}"
            return SendResult(success=True, provider_message_id=str(message_id))

        error = data.get("error") or data.get("message") or "Unknown error from UltraMsg"
        return SendResult(success=False, error=str(error))

    async def check_instance_status(self) -> ConfigCheckResult:
        """Check that the UltraMsg instance is authenticated."""
        if self.simulated:
            return ConfigCheckResult(success=False, error="UltraMsg credentials not configured")

        try:
            async with self._get_client() as client:
                response = await client.post("/instance/status", data={"token": self.token})
                response.raise_for_status()
                data: dict[str, Any] = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"UltraMsg configuration check failed: {e}")
            return ConfigCheckResult(success=False, error=str(e))

        if data.get("account_status") == "authenticated":
            logger.info("UltraMsg configuration verified successfully")
            return ConfigCheckResult(success=True, details=data)

        logger.error(f"UltraMsg instance not authenticated: {data}")
        return ConfigCheckResult(success=False, error="Instance not authenticated", details=data)
