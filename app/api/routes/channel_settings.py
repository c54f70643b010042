"""Channel provider settings (credentials are stored server-side and never returned)."""

import logging
from typing import Any

from fastapi import APIRouter, Query

from app.api.deps import DbSession, Processor
from app.api.schemas.notification import CamelModel
from app.core.exceptions import ValidationError
from app.infrastructure.channels.email import EmailSender
from app.infrastructure.channels.whatsapp import WhatsAppSender
from app.persistence.models.notification import NotificationChannel
from app.persistence.repositories.tenant_channel_config_repository import (
    TenantChannelConfigRepository,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class WhatsAppSettingsRequest(CamelModel):
    """UltraMsg credentials for a tenant."""
    tenant_id: str
    instance_id: str
    token: str


class WhatsAppSettingsResponse(CamelModel):
    success: bool
    tenant_id: str
    instance_id: str
    has_token: bool


class ConfigTestResponse(CamelModel):
    success: bool
    error: str | None = None
    instance_info: dict[str, Any] | None = None


def _whatsapp_sender(processor: Processor) -> WhatsAppSender:
    sender = processor.senders.get(NotificationChannel.WHATSAPP)
    if not isinstance(sender, WhatsAppSender):
        raise ValidationError("WhatsApp channel is not available")
    return sender


@router.put("/whatsapp", response_model=WhatsAppSettingsResponse)
async def update_whatsapp_settings(
    request: WhatsAppSettingsRequest,
    db: DbSession,
) -> WhatsAppSettingsResponse:
    """Store a tenant's UltraMsg credentials (token encrypted at rest)."""
    if not request.instance_id.strip() or not request.token.strip():
        raise ValidationError("instanceId and token are required")

    repo = TenantChannelConfigRepository(db)
    config = await repo.upsert_whatsapp_credentials(
        tenant_id=request.tenant_id,
        instance_id=request.instance_id.strip(),
        token=request.token.strip(),
    )
    logger.info(f"Updated WhatsApp credentials for tenant {request.tenant_id}")
    return WhatsAppSettingsResponse(
        success=True,
        tenant_id=config.tenant_id,
        instance_id=config.ultramsg_instance_id,
        has_token=bool(config.ultramsg_token),
    )


@router.post("/whatsapp/test", response_model=ConfigTestResponse, response_model_exclude_none=True)
async def test_whatsapp_settings(
    db: DbSession,
    processor: Processor,
    tenant_id: str | None = Query(default=None, alias="tenantId"),
) -> ConfigTestResponse:
    """Check the UltraMsg instance of a tenant (or the global one)."""
    sender = _whatsapp_sender(processor)
    if tenant_id:
        config = await TenantChannelConfigRepository(db).get_by_tenant_id(tenant_id)
        if config is not None and config.has_whatsapp_credentials:
            sender = sender.with_credentials(config.ultramsg_instance_id, config.ultramsg_token)

    result = await sender.check_instance_status()
    return ConfigTestResponse(
        success=result.success,
        error=result.error,
        instance_info=result.details or None,
    )


@router.post("/email/test", response_model=ConfigTestResponse, response_model_exclude_none=True)
async def test_email_settings(processor: Processor) -> ConfigTestResponse:
    """Check that the SMTP server accepts the configured login."""
    sender = processor.senders.get(NotificationChannel.EMAIL)
    if not isinstance(sender, EmailSender):
        raise ValidationError("Email channel is not available")

    result = await sender.verify()
    return ConfigTestResponse(success=result.success, error=result.error)
