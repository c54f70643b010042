"""WhatsApp message templates."""

from app.infrastructure.channels.base import TextPayload


def lead_welcome_message(lead_name: str, assigned_employee: str | None = None) -> TextPayload:
    if assigned_employee:
        employee_text = f"{assigned_employee} from our team will be in touch with you shortly! 🤝"
    else:
        employee_text = "Our team will be in touch with you shortly! 🤝"

    return TextPayload(
        body=(
            f"Hi {lead_name}! 👋\n\n"
            "Thank you for your interest in KnotSync services! We're excited to help you achieve your goals. 🚀\n\n"
            f"{employee_text}\n\n"
            "We typically respond within 24 hours and will provide a customized solution for your needs. \n\n"
            "If you have any immediate questions, feel free to reply to this message! 💬\n\n"
            "Best regards,\n"
            "The KnotSync Team ✨"
        )
    )


def lead_assigned_message(
    employee_name: str,
    lead_name: str,
    source: str,
    lead_phone: str | None = None,
) -> TextPayload:
    phone_line = f"\nPhone: {lead_phone}" if lead_phone else ""
    return TextPayload(
        body=(
            f"🎯 Hi {employee_name}!\n\n"
            f"You have been assigned a new lead: {lead_name} (from {source}).{phone_line}\n\n"
            "Please follow up as soon as possible! 📞\n\n"
            "- KnotSync CRM"
        )
    )


def follow_up_reminder_message(
    employee_name: str,
    customer_name: str,
    reminder_title: str,
    scheduled_time: str,
) -> TextPayload:
    return TextPayload(
        body=(
            f"🔔 Hi {employee_name}!\n\n"
            f'Follow-up reminder: "{reminder_title}" for {customer_name} is due ({scheduled_time}). \n\n'
            "Please contact them soon! 📞\n\n"
            "- KnotSync CRM"
        )
    )


def customer_follow_up_message(
    customer_name: str,
    employee_name: str,
    company_name: str = "KnotSync",
) -> TextPayload:
    return TextPayload(
        body=(
            f"Hi {customer_name}! 👋\n\n"
            f"This is {employee_name} from {company_name}. \n\n"
            "I wanted to follow up on our previous conversation. How can I help you today? \n\n"
            "Feel free to ask any questions! 😊\n\n"
            "Best regards,\n"
            f"{employee_name}"
        )
    )
