"""Channel sender implementations."""

from app.infrastructure.channels.base import (
    BrowserPayload,
    ChannelSender,
    ConfigCheckResult,
    EmailPayload,
    SendResult,
    TextPayload,
)
from app.infrastructure.channels.browser import BrowserSender
from app.infrastructure.channels.email import EmailSender
from app.infrastructure.channels.factory import ChannelSenderFactory, build_default_senders
from app.infrastructure.channels.whatsapp import WhatsAppSender

__all__ = [
    "BrowserPayload",
    "BrowserSender",
    "ChannelSender",
    "ChannelSenderFactory",
    "ConfigCheckResult",
    "EmailPayload",
    "EmailSender",
    "SendResult",
    "TextPayload",
    "WhatsAppSender",
    "build_default_senders",
]
