"""Maps a notification and a channel to a rendered payload."""

import logging
from typing import Any, Callable, Union

from app.core.clock import Clock, utcnow
from app.core.exceptions import TemplateMissingError
from app.domain.templates import email as email_templates
from app.domain.templates import whatsapp as whatsapp_templates
from app.domain.templates.formatting import format_display_time, format_notification_time
from app.infrastructure.channels.base import BrowserPayload, EmailPayload, TextPayload
from app.persistence.models.notification import (
    Notification,
    NotificationChannel,
    NotificationType,
)

logger = logging.getLogger(__name__)

RenderedPayload = Union[EmailPayload, TextPayload, BrowserPayload]


class TemplateResolver:
    """Renders notifications for the email, WhatsApp and browser channels.

    Every type renders for the browser. Email and WhatsApp cover the types
    listed in ``_renderers``; other combinations (and SMS) render nothing,
    which callers treat as "skip this channel".
    """

    def __init__(self, company_name: str = "KnotSync", clock: Clock = utcnow) -> None:
        self.company_name = company_name
        self.clock = clock
        self._renderers: dict[tuple[str, str], Callable[[Notification], RenderedPayload]] = {
            (NotificationChannel.EMAIL, NotificationType.LEAD_ASSIGNED): self._lead_assigned_email,
            (NotificationChannel.EMAIL, NotificationType.WELCOME_MESSAGE): self._welcome_email,
            (NotificationChannel.EMAIL, NotificationType.FOLLOW_UP_REMINDER): self._follow_up_email,
            (NotificationChannel.EMAIL, NotificationType.SYSTEM_ALERT): self._system_alert_email,
            (NotificationChannel.WHATSAPP, NotificationType.LEAD_ASSIGNED): self._lead_assigned_whatsapp,
            (NotificationChannel.WHATSAPP, NotificationType.WELCOME_MESSAGE): self._welcome_whatsapp,
            (NotificationChannel.WHATSAPP, NotificationType.FOLLOW_UP_REMINDER): self._follow_up_whatsapp,
            (NotificationChannel.WHATSAPP, NotificationType.CUSTOMER_UPDATED): self._customer_follow_up_whatsapp,
        }

    def render(self, notification: Notification, channel: str) -> RenderedPayload | None:
        """Render a notification for one channel.

        Returns:
            The channel payload, or None when no template exists
        """
        try:
            renderer = self._get_renderer(notification.type, channel)
        except TemplateMissingError as e:
            logger.warning(e.message)
            return None
        return renderer(notification)

    def has_template(self, notification_type: str, channel: str) -> bool:
        if channel == NotificationChannel.BROWSER:
            return True
        return (channel, notification_type) in self._renderers

    def _get_renderer(
        self, notification_type: str, channel: str
    ) -> Callable[[Notification], RenderedPayload]:
        if channel == NotificationChannel.BROWSER:
            return self._browser
        renderer = self._renderers.get((channel, notification_type))
        if renderer is None:
            raise TemplateMissingError(notification_type, channel)
        return renderer

    @staticmethod
    def _metadata(notification: Notification) -> dict[str, Any]:
        return notification.extra_data or {}

    def _browser(self, notification: Notification) -> BrowserPayload:
        return BrowserPayload(
            notification_id=notification.id,
            title=notification.title,
            message=notification.message,
            priority=notification.priority,
            relative_time=format_notification_time(notification.created_at, now=self.clock()),
        )

    def _lead_assigned_email(self, notification: Notification) -> EmailPayload:
        metadata = self._metadata(notification)
        return email_templates.lead_assigned_email(
            employee_name=notification.recipient_name,
            lead_name=notification.customer_name or "Unknown",
            lead_email=metadata.get("leadEmail") or "",
            lead_phone=metadata.get("leadPhone"),
            source=metadata.get("source") or "Unknown",
            received=format_display_time(notification.created_at),
        )

    def _welcome_email(self, notification: Notification) -> EmailPayload:
        return email_templates.lead_welcome_email(
            lead_name=notification.recipient_name,
            assigned_employee=self._metadata(notification).get("assignedEmployee"),
        )

    def _follow_up_email(self, notification: Notification) -> EmailPayload:
        metadata = self._metadata(notification)
        return email_templates.follow_up_reminder_email(
            employee_name=notification.recipient_name,
            customer_name=notification.customer_name or "Unknown",
            reminder_title=notification.title,
            description=notification.message,
            scheduled_time=format_display_time(notification.scheduled_for),
            customer_email=metadata.get("customerEmail"),
            customer_phone=metadata.get("customerPhone"),
        )

    def _system_alert_email(self, notification: Notification) -> EmailPayload:
        return email_templates.system_alert_email(
            recipient_name=notification.recipient_name,
            title=notification.title,
            message=notification.message,
        )

    def _lead_assigned_whatsapp(self, notification: Notification) -> TextPayload:
        metadata = self._metadata(notification)
        return whatsapp_templates.lead_assigned_message(
            employee_name=notification.recipient_name,
            lead_name=notification.customer_name or "Unknown",
            source=metadata.get("source") or "Unknown",
            lead_phone=metadata.get("leadPhone"),
        )

    def _welcome_whatsapp(self, notification: Notification) -> TextPayload:
        return whatsapp_templates.lead_welcome_message(
            lead_name=notification.recipient_name,
            assigned_employee=self._metadata(notification).get("assignedEmployee"),
        )

    def _follow_up_whatsapp(self, notification: Notification) -> TextPayload:
        return whatsapp_templates.follow_up_reminder_message(
            employee_name=notification.recipient_name,
            customer_name=notification.customer_name or "Unknown",
            reminder_title=notification.title,
            scheduled_time=format_display_time(notification.scheduled_for),
        )

    def _customer_follow_up_whatsapp(self, notification: Notification) -> TextPayload:
        metadata = self._metadata(notification)
        return whatsapp_templates.customer_follow_up_message(
            customer_name=notification.recipient_name,
            employee_name=metadata.get("employeeName") or "Team",
            company_name=metadata.get("companyName") or self.company_name,
        )
