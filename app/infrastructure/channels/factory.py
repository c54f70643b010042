"""Channel sender factory."""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.channels.base import ChannelSender, Sleep
from app.infrastructure.channels.browser import BrowserSender
from app.infrastructure.channels.email import EmailSender
from app.infrastructure.channels.whatsapp import WhatsAppSender
from app.persistence.models.notification import NotificationChannel
from app.persistence.models.tenant_channel_config import TenantChannelConfig
from app.persistence.repositories.tenant_channel_config_repository import (
    TenantChannelConfigRepository,
)
from app.settings import Settings

logger = logging.getLogger(__name__)


def build_default_senders(settings: Settings, sleep: Sleep = asyncio.sleep) -> dict[str, ChannelSender]:
    """Build the process-wide senders from global settings.

    SMS is reserved and has no sender.
    """
    senders: dict[str, ChannelSender] = {
        NotificationChannel.EMAIL: EmailSender.from_settings(settings, sleep=sleep),
        NotificationChannel.WHATSAPP: WhatsAppSender.from_settings(settings, sleep=sleep),
        NotificationChannel.BROWSER: BrowserSender(),
    }
    for channel, sender in senders.items():
        if getattr(sender, "simulated", False):
            logger.warning(f"{channel} sender running in simulated mode (credentials not configured)")
    return senders


class ChannelSenderFactory:
    """Resolves the sender for a channel, honouring per-tenant credentials."""

    def __init__(self, session: AsyncSession, default_senders: dict[str, ChannelSender]) -> None:
        """Initialize factory with database session.

        Args:
            session: Database session for fetching tenant config
            default_senders: Senders configured from global settings
        """
        self.session = session
        self.default_senders = default_senders
        self._config_cache: dict[str, TenantChannelConfig | None] = {}

    async def get_sender(self, channel: str, tenant_id: str | None = None) -> ChannelSender | None:
        """Get the sender for a channel.

        Args:
            channel: Channel name
            tenant_id: Tenant owning the notification, if any

        Returns:
            Sender instance or None if the channel has no sender
        """
        sender = self.default_senders.get(channel)
        if channel != NotificationChannel.WHATSAPP or not tenant_id:
            return sender
        if not isinstance(sender, WhatsAppSender):
            return sender

        config = await self._get_config(tenant_id)
        if config is None or not config.has_whatsapp_credentials:
            return sender
        return sender.with_credentials(config.ultramsg_instance_id, config.ultramsg_token)

    async def _get_config(self, tenant_id: str) -> TenantChannelConfig | None:
        """Get tenant channel config with caching."""
        if tenant_id not in self._config_cache:
            repo = TenantChannelConfigRepository(self.session)
            self._config_cache[tenant_id] = await repo.get_by_tenant_id(tenant_id)
        return self._config_cache[tenant_id]
