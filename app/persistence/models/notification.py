"""Notification model for multi-channel delivery."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from app.core.clock import utcnow
from app.persistence.database import Base


def generate_notification_id() -> str:
    return f"ntf_{uuid.uuid4().hex[:16]}"


class Notification(Base):
    """A notification queued for delivery on one or more channels."""

    __tablename__ = "notifications"

    id = Column(String(32), primary_key=True, default=generate_notification_id)
    tenant_id = Column(String(64), nullable=True, index=True)

    # Classification: see NotificationType / NotificationPriority
    type = Column(String(50), nullable=False, index=True)
    priority = Column(String(20), default="medium", nullable=False)

    # Content
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    # Template inputs, e.g. leadEmail, customerPhone, assignedEmployee
    extra_data = Column("metadata", JSON, nullable=False, default=dict)

    # Recipient
    recipient_id = Column(String(64), nullable=False, index=True)
    recipient_email = Column(String(255), nullable=False)
    recipient_name = Column(String(255), nullable=False, default="")
    recipient_phone = Column(String(32), nullable=True)

    # Context links
    customer_id = Column(String(64), nullable=True)
    customer_name = Column(String(255), nullable=True)
    lead_id = Column(String(64), nullable=True)
    reminder_id = Column(String(64), nullable=True, index=True)

    # Delivery plan, ordered list of channel names
    channels = Column(JSON, nullable=False)
    scheduled_for = Column(DateTime, nullable=True, index=True)

    # Lifecycle: pending -> sent | failed
    status = Column(String(20), default="pending", nullable=False, index=True)
    attempts = Column(Integer, default=0, nullable=False)
    max_attempts = Column(Integer, default=3, nullable=False)

    # Per-channel delivery flags (never reset once true)
    email_sent = Column(Boolean, default=False, nullable=False)
    email_sent_at = Column(DateTime, nullable=True)
    whatsapp_sent = Column(Boolean, default=False, nullable=False)
    whatsapp_sent_at = Column(DateTime, nullable=True)
    browser_sent = Column(Boolean, default=False, nullable=False)
    browser_sent_at = Column(DateTime, nullable=True)
    sms_sent = Column(Boolean, default=False, nullable=False)
    sms_sent_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
    sent_at = Column(DateTime, nullable=True)
    read_at = Column(DateTime, nullable=True)

    errors = relationship(
        "NotificationError",
        order_by="NotificationError.id",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, type={self.type}, status={self.status}, attempts={self.attempts})>"

    def is_channel_sent(self, channel: str) -> bool:
        """Whether the given channel has been delivered."""
        return bool(getattr(self, f"{channel}_sent", False))

    @property
    def is_exhausted(self) -> bool:
        return self.attempts >= self.max_attempts


class NotificationError(Base):
    """One failed delivery attempt, appended in order."""

    __tablename__ = "notification_errors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    notification_id = Column(
        String(32),
        ForeignKey("notifications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    channel = Column(String(20), nullable=True)
    message = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<NotificationError(notification_id={self.notification_id}, channel={self.channel})>"


class NotificationType:
    """Notification type constants (open to extension)."""
    LEAD_ASSIGNED = "lead_assigned"
    FOLLOW_UP_REMINDER = "follow_up_reminder"
    WELCOME_MESSAGE = "welcome_message"
    CUSTOMER_UPDATED = "customer_updated"
    SYSTEM_ALERT = "system_alert"

    ALL = (LEAD_ASSIGNED, FOLLOW_UP_REMINDER, WELCOME_MESSAGE, CUSTOMER_UPDATED, SYSTEM_ALERT)


class NotificationPriority:
    """Notification priority constants."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    ALL = (LOW, MEDIUM, HIGH, URGENT)


class NotificationStatus:
    """Notification lifecycle status constants."""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"

    TERMINAL = (SENT, FAILED)


class NotificationChannel:
    """Delivery channel constants. SMS is reserved and has no sender."""
    EMAIL = "email"
    WHATSAPP = "whatsapp"
    BROWSER = "browser"
    SMS = "sms"

    ALL = (EMAIL, WHATSAPP, BROWSER, SMS)
