"""Context variables carried into log records (request, tenant, notification)."""

from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
tenant_id_var: ContextVar[Optional[str]] = ContextVar("tenant_id", default=None)
notification_id_var: ContextVar[Optional[str]] = ContextVar("notification_id", default=None)


def set_request_id(request_id: str | None) -> None:
    """Set the current request id."""
    request_id_var.set(request_id)


def get_request_id() -> str | None:
    """Get the current request id."""
    return request_id_var.get()


def set_tenant_context(tenant_id: str | None) -> None:
    """Set the current tenant context.

    Args:
        tenant_id: Tenant ID to set in context
    """
    tenant_id_var.set(tenant_id)


def get_tenant_context() -> str | None:
    """Get the current tenant context.

    Returns:
        Current tenant ID or None
    """
    return tenant_id_var.get()


def set_notification_context(notification_id: str | None) -> None:
    """Set the notification currently being dispatched."""
    notification_id_var.set(notification_id)


def get_notification_context() -> str | None:
    return notification_id_var.get()


def clear_context() -> None:
    """Clear all context values."""
    request_id_var.set(None)
    tenant_id_var.set(None)
    notification_id_var.set(None)
