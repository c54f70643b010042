"""Tests for notification templates and the template resolver."""

from datetime import datetime, timedelta

import pytest

from app.domain.templates import email as email_templates
from app.domain.templates import whatsapp as whatsapp_templates
from app.domain.templates.formatting import format_display_time, format_notification_time
from app.domain.templates.resolver import TemplateResolver
from app.infrastructure.channels.base import BrowserPayload, EmailPayload, TextPayload
from app.persistence.models.notification import Notification

NOW = datetime(2024, 3, 5, 14, 7, 9)


def _notification(**overrides):
    data = {
        "id": "ntf_abc",
        "type": "lead_assigned",
        "priority": "high",
        "title": "New Lead Assigned: Priya Shah",
        "message": "You have been assigned a new lead from website",
        "recipient_id": "emp_1",
        "recipient_email": "sam@example.com",
        "recipient_name": "Sam",
        "customer_name": "Priya Shah",
        "channels": ["email", "browser"],
        "extra_data": {"leadEmail": "priya@example.com", "source": "website"},
        "created_at": NOW - timedelta(minutes=5),
    }
    data.update(overrides)
    return Notification(**data)


@pytest.fixture
def resolver():
    return TemplateResolver("KnotSync", clock=lambda: NOW)


class TestFormatting:
    """Tests for timestamp formatting."""

    def test_display_time(self):
        assert format_display_time(NOW) == "03/05/2024, 02:07:09 PM UTC"

    def test_display_time_missing(self):
        assert format_display_time(None) == "Now"

    @pytest.mark.parametrize(
        "age, expected",
        [
            (timedelta(seconds=30), "Just now"),
            (timedelta(minutes=5), "5 minutes ago"),
            (timedelta(hours=3, minutes=10), "3 hours ago"),
            (timedelta(days=2), "2 days ago"),
            (timedelta(days=10), "02/24/2024"),
        ],
    )
    def test_notification_time(self, age, expected):
        assert format_notification_time(NOW - age, now=NOW) == expected


class TestEmailTemplates:
    """Tests for email bodies."""

    def test_lead_assigned_without_phone(self):
        payload = email_templates.lead_assigned_email(
            employee_name="Sam",
            lead_name="Priya Shah",
            lead_email="priya@example.com",
            source="website",
            received="03/05/2024, 02:07:09 PM UTC",
        )

        assert payload.subject == "🎯 New Lead Assigned: Priya Shah"
        assert "Phone: Not provided" in payload.text
        assert "Source: website" in payload.text
        assert "Hi Sam," in payload.html

    def test_html_is_escaped(self):
        payload = email_templates.system_alert_email(
            recipient_name="Sam",
            title="Disk <full>",
            message="Usage at 99% & rising",
        )

        assert payload.subject == "🔔 Disk <full>"
        assert "Disk &lt;full&gt;" in payload.html
        assert "99% &amp; rising" in payload.html
        assert "Usage at 99% & rising" in payload.text

    def test_follow_up_omits_missing_details(self):
        """Test that absent optional details leave no empty lines."""
        payload = email_templates.follow_up_reminder_email(
            employee_name="Sam",
            customer_name="Acme Corp",
            reminder_title="Quarterly check-in",
            scheduled_time="03/05/2024, 02:07:09 PM UTC",
            customer_phone="+12817882316",
        )

        assert payload.subject == "⏰ Follow-up Reminder: Acme Corp"
        assert "Phone: +12817882316" in payload.text
        assert "Email:" not in payload.text
        assert "Description:" not in payload.text
        assert "\n\n\n" not in payload.text

    def test_welcome_mentions_assigned_employee(self):
        payload = email_templates.lead_welcome_email("Priya", assigned_employee="Sam")
        assert payload.subject == "Welcome Priya! Thank you for your interest"
        assert "Sam from our team will be in touch" in payload.text


class TestWhatsAppTemplates:
    """Tests for WhatsApp messages."""

    def test_welcome_without_employee(self):
        payload = whatsapp_templates.lead_welcome_message("Priya")
        assert payload.body.startswith("Hi Priya! 👋")
        assert "Our team will be in touch with you shortly!" in payload.body

    def test_lead_assigned_with_phone(self):
        payload = whatsapp_templates.lead_assigned_message("Sam", "Priya", "website", lead_phone="+919876543210")
        assert "Priya (from website)" in payload.body
        assert "Phone: +919876543210" in payload.body

    def test_customer_follow_up_signature(self):
        payload = whatsapp_templates.customer_follow_up_message("Priya", "Sam", company_name="Acme")
        assert "This is Sam from Acme." in payload.body
        assert payload.body.endswith("Sam")


class TestTemplateResolver:
    """Tests for channel rendering."""

    def test_renders_email(self, resolver):
        payload = resolver.render(_notification(), "email")

        assert isinstance(payload, EmailPayload)
        assert payload.subject == "🎯 New Lead Assigned: Priya Shah"
        assert "Email: priya@example.com" in payload.text
        assert "Received: 03/05/2024, 02:02:09 PM UTC" in payload.text

    def test_renders_browser_for_any_type(self, resolver):
        payload = resolver.render(_notification(type="quota_exceeded"), "browser")

        assert isinstance(payload, BrowserPayload)
        assert payload.notification_id == "ntf_abc"
        assert payload.relative_time == "5 minutes ago"
        assert resolver.has_template("quota_exceeded", "browser") is True

    def test_renders_whatsapp_welcome(self, resolver):
        notification = _notification(
            type="welcome_message",
            recipient_name="Priya",
            extra_data={"assignedEmployee": "Sam"},
        )

        payload = resolver.render(notification, "whatsapp")

        assert isinstance(payload, TextPayload)
        assert "Sam from our team" in payload.body

    def test_customer_update_defaults(self, resolver):
        notification = _notification(type="customer_updated", recipient_name="Priya", extra_data={})

        payload = resolver.render(notification, "whatsapp")

        assert "This is Team from KnotSync." in payload.body

    @pytest.mark.parametrize(
        "notification_type, channel",
        [
            ("customer_updated", "email"),
            ("system_alert", "whatsapp"),
            ("lead_assigned", "sms"),
            ("quota_exceeded", "email"),
        ],
    )
    def test_missing_template_renders_nothing(self, resolver, notification_type, channel):
        """Test that unsupported combinations are skipped rather than raised."""
        assert resolver.render(_notification(type=notification_type), channel) is None
        assert resolver.has_template(notification_type, channel) is False
