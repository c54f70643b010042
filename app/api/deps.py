"""FastAPI dependencies for the database session and the notification processor."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.services.notification_processor import NotificationProcessor
from app.persistence.database import get_db


def get_processor(request: Request) -> NotificationProcessor:
    """Get the processor created at application startup.

    Args:
        request: Incoming request

    Returns:
        The application's notification processor
    """
    return request.app.state.notification_processor


DbSession = Annotated[AsyncSession, Depends(get_db)]
Processor = Annotated[NotificationProcessor, Depends(get_processor)]
