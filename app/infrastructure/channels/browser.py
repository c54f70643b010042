"""In-app browser notification sender."""

import logging

from app.infrastructure.channels.base import BrowserPayload, ChannelSender, SendResult

logger = logging.getLogger(__name__)


class BrowserSender(ChannelSender):
    """Marks the browser channel as delivered.

    Display happens in the recipient's open client session, which polls the
    notifications API, so there is nothing to push from the server.
    """

    channel = "browser"

    async def send(self, destination: str | None, payload: BrowserPayload) -> SendResult:
        logger.info(f"Browser notification ready for {destination}: {payload.title}")
        return SendResult(success=True, provider_message_id=f"browser-{payload.notification_id}")
