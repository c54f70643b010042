"""Tenant channel configuration repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.persistence.models.tenant_channel_config import TenantChannelConfig
from app.persistence.repositories.base import BaseRepository, storage_operation


class TenantChannelConfigRepository(BaseRepository[TenantChannelConfig]):
    """Repository for per-tenant provider credentials."""

    def __init__(self, session: AsyncSession):
        """Initialize tenant channel config repository."""
        super().__init__(TenantChannelConfig, session)

    @storage_operation
    async def get_by_tenant_id(self, tenant_id: str) -> TenantChannelConfig | None:
        """Get the configuration of a tenant, if any."""
        stmt = select(TenantChannelConfig).where(TenantChannelConfig.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @storage_operation
    async def upsert_whatsapp_credentials(
        self,
        tenant_id: str,
        instance_id: str,
        token: str,
    ) -> TenantChannelConfig:
        """Create or replace the UltraMsg credentials of a tenant."""
        config = await self.get_by_tenant_id(tenant_id)
        if config is None:
            config = TenantChannelConfig(tenant_id=tenant_id)
            self.session.add(config)

        config.ultramsg_instance_id = instance_id
        config.ultramsg_token = token
        await self.session.commit()
        await self.session.refresh(config)
        return config
