"""Display formatting for notification timestamps."""

from datetime import datetime

from app.core.clock import utcnow


def format_display_time(value: datetime | None) -> str:
    """Human-readable absolute time used inside message bodies."""
    if value is None:
        return "Now"
    return value.strftime("%m/%d/%Y, %I:%M:%S %p") + " UTC"


def format_notification_time(timestamp: datetime, now: datetime | None = None) -> str:
    """Relative age of a notification ("Just now", "5 minutes ago", ...).

    Anything a week old or more is shown as a date.
    """
    now = now or utcnow()
    elapsed = (now - timestamp).total_seconds()
    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} minutes ago"
    if hours < 24:
        return f"{hours} hours ago"
    if days < 7:
        return f"{days} days ago"
    return timestamp.strftime("%m/%d/%Y")
