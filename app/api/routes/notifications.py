"""Notification endpoints: demo creation, processing control, inbox and cleanup."""

import logging
from typing import Any

from fastapi import APIRouter, Query
from pydantic import Field

from app.api.deps import DbSession, Processor
from app.api.schemas.notification import CamelModel, NotificationResponse
from app.core.exceptions import NotFoundError, ValidationError
from app.domain.services.notification_queue import NotificationQueueService
from app.persistence.models.notification import NotificationType
from app.persistence.repositories.notification_repository import NotificationRepository
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response Models

class DemoNotificationRequest(CamelModel):
    """Demo notification request."""
    user_id: str | None = None
    user_name: str | None = None
    user_email: str | None = None
    type: str = NotificationType.SYSTEM_ALERT


class DemoNotificationResponse(CamelModel):
    success: bool
    message: str
    notification_id: str


class StartProcessorRequest(CamelModel):
    """Processor start request."""
    interval_ms: int | None = Field(default=None, gt=0)


class ProcessorActionResponse(CamelModel):
    success: bool
    message: str
    summary: dict[str, Any] | None = None


class ProcessorStatusResponse(CamelModel):
    running: bool
    is_processing: bool
    interval_ms: int | None = None


class MarkReadRequest(CamelModel):
    """Read acknowledgement for one notification, or all of a user's."""
    notification_id: str | None = None
    user_id: str | None = None
    mark_all: bool = False


class MessageResponse(CamelModel):
    success: bool
    message: str


class NotificationListResponse(CamelModel):
    success: bool
    notifications: list[NotificationResponse] | None = None
    count: int | None = None


class CleanupResponse(CamelModel):
    success: bool
    deleted: int


# Endpoints

@router.post("/demo", response_model=DemoNotificationResponse)
async def create_demo_notification(
    request: DemoNotificationRequest,
    db: DbSession,
) -> DemoNotificationResponse:
    """Queue a demo notification (email + browser) for a user."""
    if not request.user_id or not request.user_name or not request.user_email:
        raise ValidationError("userId, userName, and userEmail are required")

    queue = NotificationQueueService(db)
    notification = await queue.create_demo_notification(
        user_id=request.user_id,
        user_name=request.user_name,
        user_email=request.user_email,
        notification_type=request.type,
    )
    return DemoNotificationResponse(
        success=True,
        message="Demo notification created successfully",
        notification_id=notification.id,
    )


@router.post("/process", response_model=ProcessorActionResponse, response_model_exclude_none=True)
async def process_notifications(processor: Processor) -> ProcessorActionResponse:
    """Run one processing pass now."""
    summary = await processor.process_notifications()
    message = (
        "Notification processing already in progress"
        if summary.skipped
        else "Notifications processed successfully"
    )
    return ProcessorActionResponse(success=True, message=message, summary=summary.to_dict())


@router.put("/process", response_model=ProcessorActionResponse, response_model_exclude_none=True)
async def start_processor(
    processor: Processor,
    request: StartProcessorRequest | None = None,
) -> ProcessorActionResponse:
    """Start (or restart) the periodic processor."""
    interval_ms = processor.start(request.interval_ms if request else None)
    return ProcessorActionResponse(
        success=True,
        message=f"Notification processor started with {interval_ms}ms interval",
    )


@router.delete("/process", response_model=ProcessorActionResponse, response_model_exclude_none=True)
async def stop_processor(processor: Processor) -> ProcessorActionResponse:
    """Stop the periodic processor."""
    processor.stop()
    return ProcessorActionResponse(success=True, message="Notification processor stopped")


@router.get("/process/status", response_model=ProcessorStatusResponse)
async def get_processor_status(processor: Processor) -> ProcessorStatusResponse:
    return ProcessorStatusResponse(**processor.status())


@router.get("", response_model=NotificationListResponse, response_model_exclude_none=True)
async def list_notifications(
    db: DbSession,
    user_id: str | None = Query(default=None, alias="userId"),
    limit: int = Query(default=50, ge=1, le=200),
    count_only: bool = Query(default=False, alias="countOnly"),
) -> NotificationListResponse:
    """List a user's notifications, or count the unread ones."""
    if not user_id:
        raise ValidationError("userId parameter is required")

    repo = NotificationRepository(db)
    if count_only:
        return NotificationListResponse(success=True, count=await repo.count_unread(user_id))

    notifications = await repo.find_by_recipient(user_id, limit=limit)
    return NotificationListResponse(
        success=True,
        notifications=[NotificationResponse.from_model(n) for n in notifications],
    )


@router.patch("", response_model=MessageResponse)
async def mark_notifications_read(
    request: MarkReadRequest,
    db: DbSession,
) -> MessageResponse:
    """Mark one notification, or all of a user's, as read."""
    repo = NotificationRepository(db)

    if request.mark_all and request.user_id:
        count = await repo.mark_all_read(request.user_id)
        return MessageResponse(success=True, message=f"Marked {count} notifications as read")

    if not request.notification_id:
        raise ValidationError("notificationId is required")

    if not await repo.mark_read(request.notification_id):
        raise NotFoundError("Notification not found", {"notificationId": request.notification_id})

    return MessageResponse(success=True, message="Notification marked as read")


@router.post("/cleanup", response_model=CleanupResponse)
async def cleanup_notifications(
    processor: Processor,
    days: int = Query(default=settings.notification_retention_days, ge=1),
) -> CleanupResponse:
    """Delete sent and failed notifications older than ``days``."""
    deleted = await processor.cleanup(days)
    return CleanupResponse(success=True, deleted=deleted)
