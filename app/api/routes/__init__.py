"""API routes."""

from fastapi import APIRouter

from app.api.routes import channel_settings, follow_up_reminders, notifications

api_router = APIRouter()

api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(
    follow_up_reminders.router, prefix="/follow-up-reminders", tags=["follow-up-reminders"]
)
api_router.include_router(channel_settings.router, prefix="/channel-settings", tags=["channel-settings"])
