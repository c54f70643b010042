"""Per-tenant channel provider configuration."""

from sqlalchemy import Column, DateTime, Integer, String

from app.core.clock import utcnow
from app.persistence.database import Base
from app.persistence.types import EncryptedString


class TenantChannelConfig(Base):
    """Server-side provider credentials that override the global settings for a tenant."""

    __tablename__ = "tenant_channel_configs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(64), nullable=False, unique=True, index=True)

    # UltraMsg (WhatsApp)
    ultramsg_instance_id = Column(String(100), nullable=True)
    ultramsg_token = Column(EncryptedString(255), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<TenantChannelConfig(tenant_id={self.tenant_id})>"

    @property
    def has_whatsapp_credentials(self) -> bool:
        return bool(self.ultramsg_instance_id and self.ultramsg_token)
