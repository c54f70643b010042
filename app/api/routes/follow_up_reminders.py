"""Follow-up reminder endpoints."""

from fastapi import APIRouter, Query, status

from app.api.deps import DbSession
from app.api.schemas.notification import (
    CamelModel,
    FollowUpReminderCreate,
    FollowUpReminderResponse,
    FollowUpReminderStatusUpdate,
)
from app.core.exceptions import ValidationError
from app.domain.services.follow_up_service import (
    CreateFollowUpReminderData,
    FollowUpReminderService,
)

router = APIRouter()


class ReminderListResponse(CamelModel):
    success: bool
    reminders: list[FollowUpReminderResponse]


class ReminderResponse(CamelModel):
    success: bool
    reminder: FollowUpReminderResponse


class SuccessResponse(CamelModel):
    success: bool


class MarkSentRequest(CamelModel):
    notification_id: str | None = None


class MarkSentResponse(CamelModel):
    success: bool
    updated: bool


class MarkOverdueResponse(CamelModel):
    success: bool
    count: int


def _require_id(reminder_id: str | None) -> str:
    if not reminder_id:
        raise ValidationError("Reminder ID is required")
    return reminder_id


@router.get("", response_model=ReminderListResponse)
async def list_reminders(
    db: DbSession,
    user_id: str | None = Query(default=None, alias="userId"),
    customer_id: str | None = Query(default=None, alias="customerId"),
    get_due: bool = Query(default=False, alias="getDue"),
) -> ReminderListResponse:
    """List reminders, optionally per owner and customer, or only the due ones."""
    service = FollowUpReminderService(db)
    if get_due:
        reminders = await service.get_due_reminders()
    else:
        reminders = await service.list_reminders(created_by=user_id, customer_id=customer_id)
    return ReminderListResponse(
        success=True,
        reminders=[FollowUpReminderResponse.from_model(r) for r in reminders],
    )


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
async def create_reminder(
    request: FollowUpReminderCreate,
    db: DbSession,
) -> ReminderResponse:
    service = FollowUpReminderService(db)
    reminder = await service.create_reminder(
        CreateFollowUpReminderData(**request.model_dump())
    )
    return ReminderResponse(success=True, reminder=FollowUpReminderResponse.from_model(reminder))


@router.put("", response_model=ReminderResponse)
async def update_reminder_status(
    request: FollowUpReminderStatusUpdate,
    db: DbSession,
    reminder_id: str | None = Query(default=None, alias="id"),
) -> ReminderResponse:
    """Change a reminder's status; ``completed`` records who completed it and when."""
    service = FollowUpReminderService(db)
    reminder = await service.update_status(
        _require_id(reminder_id),
        request.status,
        completed_by=request.completed_by,
    )
    return ReminderResponse(success=True, reminder=FollowUpReminderResponse.from_model(reminder))


@router.delete("", response_model=SuccessResponse)
async def delete_reminder(
    db: DbSession,
    reminder_id: str | None = Query(default=None, alias="id"),
) -> SuccessResponse:
    service = FollowUpReminderService(db)
    await service.delete_reminder(_require_id(reminder_id))
    return SuccessResponse(success=True)


@router.get("/due", response_model=ReminderListResponse)
async def list_due_reminders(db: DbSession) -> ReminderListResponse:
    """Pending reminders whose time has come and that have not been notified."""
    service = FollowUpReminderService(db)
    reminders = await service.get_due_reminders()
    return ReminderListResponse(
        success=True,
        reminders=[FollowUpReminderResponse.from_model(r) for r in reminders],
    )


@router.post("/mark-overdue", response_model=MarkOverdueResponse)
async def mark_overdue_reminders(db: DbSession) -> MarkOverdueResponse:
    service = FollowUpReminderService(db)
    count = await service.mark_overdue_reminders()
    return MarkOverdueResponse(success=True, count=count)


@router.post("/{reminder_id}/mark-sent", response_model=MarkSentResponse)
async def mark_reminder_notification_sent(
    reminder_id: str,
    db: DbSession,
    request: MarkSentRequest | None = None,
) -> MarkSentResponse:
    """Close a reminder's notification gate."""
    service = FollowUpReminderService(db)
    updated = await service.mark_notification_sent(
        reminder_id,
        notification_id=request.notification_id if request else None,
    )
    return MarkSentResponse(success=True, updated=updated)
