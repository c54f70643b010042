"""Follow-up reminder model."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text

from app.core.clock import utcnow
from app.persistence.database import Base


def generate_reminder_id() -> str:
    return f"rem_{uuid.uuid4().hex[:16]}"


class FollowUpReminder(Base):
    """Scheduled follow-up with a customer, converted into a notification once due."""

    __tablename__ = "follow_up_reminders"

    id = Column(String(32), primary_key=True, default=generate_reminder_id)
    tenant_id = Column(String(64), nullable=True, index=True)

    customer_id = Column(String(64), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(32), nullable=True)

    # Employee who owns the reminder and receives the notification
    created_by = Column(String(64), nullable=False, index=True)
    created_by_name = Column(String(255), nullable=False)
    created_by_email = Column(String(255), nullable=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    scheduled_for = Column(DateTime, nullable=False, index=True)
    priority = Column(String(20), nullable=False, default="medium")

    # pending | completed | overdue | cancelled
    status = Column(String(20), nullable=False, default="pending", index=True)

    # Gate against duplicate reminder notifications
    notification_sent = Column(Boolean, nullable=False, default=False)
    notification_sent_at = Column(DateTime, nullable=True)
    notification_id = Column(String(32), nullable=True)

    completed_at = Column(DateTime, nullable=True)
    completed_by = Column(String(64), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<FollowUpReminder(id={self.id}, customer_id={self.customer_id}, status={self.status})>"


class FollowUpStatus:
    """Follow-up reminder status constants."""
    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

    ALL = (PENDING, COMPLETED, OVERDUE, CANCELLED)
