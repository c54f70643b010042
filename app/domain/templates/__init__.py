"""Channel templates for notifications."""

from app.domain.templates.formatting import format_display_time, format_notification_time
from app.domain.templates.resolver import RenderedPayload, TemplateResolver

__all__ = [
    "RenderedPayload",
    "TemplateResolver",
    "format_display_time",
    "format_notification_time",
]
