"""Exception hierarchy for the notification service.

HTTP-facing errors carry a status code; FastAPI handlers registered in
``app.main`` turn them into ``{"success": false, "error": ...}`` responses.
"""

from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse


class NotificationServiceError(Exception):
    """Base class for all service errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(NotificationServiceError):
    """Malformed or missing required fields, rejected before persistence."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(NotificationServiceError):
    """Requested record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class StorageError(NotificationServiceError):
    """Persistence layer failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ChannelDeliveryError(NotificationServiceError):
    """A channel send attempt failed.

    Never escapes the processor: it is recorded on the notification and
    drives the retry counter.
    """

    def __init__(self, channel: str, message: str) -> None:
        self.channel = channel
        super().__init__(message, {"channel": channel})


class TemplateMissingError(NotificationServiceError):
    """No rendering exists for a type/channel combination (soft, skip the channel)."""

    def __init__(self, notification_type: str, channel: str) -> None:
        self.notification_type = notification_type
        self.channel = channel
        super().__init__(
            f"No {channel} template for notification type '{notification_type}'",
            {"type": notification_type, "channel": channel},
        )


async def service_error_handler(request: Request, exc: NotificationServiceError) -> JSONResponse:
    """Render service errors with the API's success/error envelope."""
    content: dict[str, Any] = {"success": False, "error": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)
