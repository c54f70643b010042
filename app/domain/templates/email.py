"""Email templates (subject, HTML and plain-text bodies)."""

from html import escape

from app.infrastructure.channels.base import EmailPayload

_CARD_OPEN = (
    '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; '
    'padding: 20px; background-color: #f8f9fa;">'
    '<div style="background-color: white; padding: 30px; border-radius: 10px; '
    'box-shadow: 0 2px 10px rgba(0,0,0,0.1);">'
)
_CARD_CLOSE = "</div></div>"


def _detail(label: str, value: str) -> str:
    return f"<p><strong>{label}:</strong> {escape(value)}</p>"


def lead_assigned_email(
    employee_name: str,
    lead_name: str,
    lead_email: str,
    source: str,
    received: str,
    lead_phone: str | None = None,
) -> EmailPayload:
    phone = lead_phone or "Not provided"
    html = (
        f"{_CARD_OPEN}"
        '<h2 style="color: #2563eb; margin-bottom: 20px;">🎯 New Lead Assigned</h2>'
        f'<p style="font-size: 16px; color: #333;">Hi {escape(employee_name)},</p>'
        '<p style="color: #666;">You have been assigned a new lead. Please follow up as soon as possible:</p>'
        '<div style="background-color: #f1f5f9; padding: 20px; border-radius: 8px; margin: 20px 0;">'
        '<h3 style="color: #1e293b; margin-top: 0;">Lead Details:</h3>'
        f"{_detail('📝 Name', lead_name)}"
        f"{_detail('📧 Email', lead_email)}"
        f"{_detail('📞 Phone', phone)}"
        f"{_detail('🌐 Source', source)}"
        f"{_detail('⏰ Received', received)}"
        "</div>"
        '<div style="background-color: #ecfdf5; border: 1px solid #10b981; padding: 15px; '
        'border-radius: 8px; margin: 20px 0;">'
        '<p style="color: #065f46; margin: 0;"><strong>💡 Tip:</strong> '
        "Quick response times significantly improve conversion rates!</p>"
        "</div>"
        '<p style="color: #666;">Best regards,<br>KnotSync CRM System</p>'
        f"{_CARD_CLOSE}"
    )
    text = (
        f"Hi {employee_name},\n\n"
        "You have been assigned a new lead:\n\n"
        f"Name: {lead_name}\n"
        f"Email: {lead_email}\n"
        f"Phone: {phone}\n"
        f"Source: {source}\n"
        f"Received: {received}\n\n"
        "Please follow up with this lead as soon as possible.\n\n"
        "Best regards,\n"
        "KnotSync CRM System"
    )
    return EmailPayload(subject=f"🎯 New Lead Assigned: {lead_name}", html=html, text=text)


def lead_welcome_email(lead_name: str, assigned_employee: str | None = None) -> EmailPayload:
    if assigned_employee:
        next_step = f"{assigned_employee} from our team will be in touch with you shortly to discuss your requirements."
        next_step_html = (
            f"<p>🤝 <strong>{escape(assigned_employee)}</strong> from our team will be in touch "
            "with you shortly to discuss your requirements.</p>"
        )
    else:
        next_step = "Our team will be in touch with you shortly to discuss your requirements."
        next_step_html = f"<p>🤝 {next_step}</p>"

    html = (
        f"{_CARD_OPEN}"
        '<h2 style="color: #2563eb; margin-bottom: 20px;">🎉 Welcome to KnotSync!</h2>'
        f'<p style="font-size: 16px; color: #333;">Hi {escape(lead_name)},</p>'
        '<p style="color: #666;">Thank you for your interest in our services! '
        "We're excited to help you achieve your goals.</p>"
        '<div style="background-color: #f1f5f9; padding: 20px; border-radius: 8px; margin: 20px 0;">'
        '<h3 style="color: #1e293b; margin-top: 0;">What happens next?</h3>'
        f"{next_step_html}"
        "<p>📞 We typically respond within 24 hours</p>"
        "<p>💼 We'll provide a customized solution for your needs</p>"
        "</div>"
        '<p style="color: #666;">If you have any immediate questions, please don\'t hesitate to reach out.</p>'
        '<p style="color: #666;">Best regards,<br>The KnotSync Team</p>'
        f"{_CARD_CLOSE}"
    )
    text = (
        f"Hi {lead_name},\n\n"
        "Thank you for your interest in our services! We're excited to help you achieve your goals.\n\n"
        f"{next_step}\n\n"
        "If you have any immediate questions, please don't hesitate to reach out.\n\n"
        "Best regards,\n"
        "The KnotSync Team"
    )
    return EmailPayload(
        subject=f"Welcome {lead_name}! Thank you for your interest",
        html=html,
        text=text,
    )


def follow_up_reminder_email(
    employee_name: str,
    customer_name: str,
    reminder_title: str,
    scheduled_time: str,
    description: str | None = None,
    customer_email: str | None = None,
    customer_phone: str | None = None,
) -> EmailPayload:
    optional = [
        ("📄 Description", "Description", description),
        ("⏰ Scheduled for", "Scheduled for", scheduled_time),
        ("📧 Email", "Email", customer_email),
        ("📞 Phone", "Phone", customer_phone),
    ]
    html_details = _detail("👤 Customer", customer_name) + _detail("📝 Title", reminder_title)
    text_details = [f"Customer: {customer_name}", f"Title: {reminder_title}"]
    for html_label, text_label, value in optional:
        if value:
            html_details += _detail(html_label, value)
            text_details.append(f"{text_label}: {value}")

    html = (
        f"{_CARD_OPEN}"
        '<h2 style="color: #dc2626; margin-bottom: 20px;">⏰ Follow-up Reminder</h2>'
        f'<p style="font-size: 16px; color: #333;">Hi {escape(employee_name)},</p>'
        '<p style="color: #666;">You have a follow-up reminder due:</p>'
        '<div style="background-color: #fef2f2; border: 2px solid #dc2626; padding: 20px; '
        'border-radius: 8px; margin: 20px 0;">'
        '<h3 style="color: #7f1d1d; margin-top: 0;">Reminder Details:</h3>'
        f"{html_details}"
        "</div>"
        '<div style="background-color: #fef3c7; border: 1px solid #f59e0b; padding: 15px; '
        'border-radius: 8px; margin: 20px 0;">'
        '<p style="color: #92400e; margin: 0;"><strong>⚡ Action Required:</strong> '
        "Please contact this customer as scheduled to maintain good relationships!</p>"
        "</div>"
        '<p style="color: #666;">Best regards,<br>KnotSync CRM System</p>'
        f"{_CARD_CLOSE}"
    )
    text = (
        f"Hi {employee_name},\n\n"
        "You have a follow-up reminder due:\n\n"
        + "\n".join(text_details)
        + "\n\nPlease follow up with this customer as scheduled.\n\n"
        "Best regards,\n"
        "KnotSync CRM System"
    )
    return EmailPayload(subject=f"⏰ Follow-up Reminder: {customer_name}", html=html, text=text)


def system_alert_email(recipient_name: str, title: str, message: str) -> EmailPayload:
    html = (
        f"{_CARD_OPEN}"
        f'<h2 style="color: #2563eb; margin-bottom: 20px;">🔔 {escape(title)}</h2>'
        f'<p style="font-size: 16px; color: #333;">Hi {escape(recipient_name)},</p>'
        f'<p style="color: #666;">{escape(message)}</p>'
        '<p style="color: #666;">Best regards,<br>KnotSync CRM System</p>'
        f"{_CARD_CLOSE}"
    )
    text = (
        f"Hi {recipient_name},\n\n"
        f"{message}\n\n"
        "Best regards,\n"
        "KnotSync CRM System"
    )
    return EmailPayload(subject=f"🔔 {title}", html=html, text=text)
