"""Create notification, reminder and channel config tables

Revision ID: 0001_create_notification_tables
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_create_notification_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'notifications',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('tenant_id', sa.String(length=64), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('recipient_id', sa.String(length=64), nullable=False),
        sa.Column('recipient_email', sa.String(length=255), nullable=False),
        sa.Column('recipient_name', sa.String(length=255), nullable=False),
        sa.Column('recipient_phone', sa.String(length=32), nullable=True),
        sa.Column('customer_id', sa.String(length=64), nullable=True),
        sa.Column('customer_name', sa.String(length=255), nullable=True),
        sa.Column('lead_id', sa.String(length=64), nullable=True),
        sa.Column('reminder_id', sa.String(length=64), nullable=True),
        sa.Column('channels', sa.JSON(), nullable=False),
        sa.Column('scheduled_for', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('max_attempts', sa.Integer(), nullable=False),
        sa.Column('email_sent', sa.Boolean(), nullable=False),
        sa.Column('email_sent_at', sa.DateTime(), nullable=True),
        sa.Column('whatsapp_sent', sa.Boolean(), nullable=False),
        sa.Column('whatsapp_sent_at', sa.DateTime(), nullable=True),
        sa.Column('browser_sent', sa.Boolean(), nullable=False),
        sa.Column('browser_sent_at', sa.DateTime(), nullable=True),
        sa.Column('sms_sent', sa.Boolean(), nullable=False),
        sa.Column('sms_sent_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_notifications_tenant_id'), 'notifications', ['tenant_id'], unique=False)
    op.create_index(op.f('ix_notifications_type'), 'notifications', ['type'], unique=False)
    op.create_index(op.f('ix_notifications_recipient_id'), 'notifications', ['recipient_id'], unique=False)
    op.create_index(op.f('ix_notifications_reminder_id'), 'notifications', ['reminder_id'], unique=False)
    op.create_index(op.f('ix_notifications_scheduled_for'), 'notifications', ['scheduled_for'], unique=False)
    op.create_index(op.f('ix_notifications_status'), 'notifications', ['status'], unique=False)
    op.create_index(op.f('ix_notifications_created_at'), 'notifications', ['created_at'], unique=False)

    op.create_table(
        'notification_errors',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('notification_id', sa.String(length=32), nullable=False),
        sa.Column('channel', sa.String(length=20), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['notification_id'], ['notifications.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_notification_errors_notification_id'), 'notification_errors', ['notification_id'], unique=False
    )

    op.create_table(
        'follow_up_reminders',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('tenant_id', sa.String(length=64), nullable=True),
        sa.Column('customer_id', sa.String(length=64), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('customer_phone', sa.String(length=32), nullable=True),
        sa.Column('created_by', sa.String(length=64), nullable=False),
        sa.Column('created_by_name', sa.String(length=255), nullable=False),
        sa.Column('created_by_email', sa.String(length=255), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('scheduled_for', sa.DateTime(), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notification_sent', sa.Boolean(), nullable=False),
        sa.Column('notification_sent_at', sa.DateTime(), nullable=True),
        sa.Column('notification_id', sa.String(length=32), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('completed_by', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_follow_up_reminders_tenant_id'), 'follow_up_reminders', ['tenant_id'], unique=False)
    op.create_index(op.f('ix_follow_up_reminders_customer_id'), 'follow_up_reminders', ['customer_id'], unique=False)
    op.create_index(op.f('ix_follow_up_reminders_created_by'), 'follow_up_reminders', ['created_by'], unique=False)
    op.create_index(op.f('ix_follow_up_reminders_scheduled_for'), 'follow_up_reminders', ['scheduled_for'], unique=False)
    op.create_index(op.f('ix_follow_up_reminders_status'), 'follow_up_reminders', ['status'], unique=False)

    op.create_table(
        'tenant_channel_configs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tenant_id', sa.String(length=64), nullable=False),
        sa.Column('ultramsg_instance_id', sa.String(length=100), nullable=True),
        sa.Column('ultramsg_token', sa.String(length=765), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_tenant_channel_configs_tenant_id'), 'tenant_channel_configs', ['tenant_id'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_tenant_channel_configs_tenant_id'), table_name='tenant_channel_configs')
    op.drop_table('tenant_channel_configs')
    op.drop_index(op.f('ix_follow_up_reminders_status'), table_name='follow_up_reminders')
    op.drop_index(op.f('ix_follow_up_reminders_scheduled_for'), table_name='follow_up_reminders')
    op.drop_index(op.f('ix_follow_up_reminders_created_by'), table_name='follow_up_reminders')
    op.drop_index(op.f('ix_follow_up_reminders_customer_id'), table_name='follow_up_reminders')
    op.drop_index(op.f('ix_follow_up_reminders_tenant_id'), table_name='follow_up_reminders')
    op.drop_table('follow_up_reminders')
    op.drop_index(op.f('ix_notification_errors_notification_id'), table_name='notification_errors')
    op.drop_table('notification_errors')
    op.drop_index(op.f('ix_notifications_created_at'), table_name='notifications')
    op.drop_index(op.f('ix_notifications_status'), table_name='notifications')
    op.drop_index(op.f('ix_notifications_scheduled_for'), table_name='notifications')
    op.drop_index(op.f('ix_notifications_reminder_id'), table_name='notifications')
    op.drop_index(op.f('ix_notifications_recipient_id'), table_name='notifications')
    op.drop_index(op.f('ix_notifications_type'), table_name='notifications')
    op.drop_index(op.f('ix_notifications_tenant_id'), table_name='notifications')
    op.drop_table('notifications')
