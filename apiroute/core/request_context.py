"""
Request context management.
Use ContextVar to share the correlation id across async execution.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

# Context variable for the per-request correlation id (UUID).
_correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
# Context variable for the name of the route serving the request.
_route_name_var: ContextVar[Optional[str]] = ContextVar("route_name", default=None)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation id."""
    return _correlation_id_var.get()


def get_route_name() -> Optional[str]:
    """Get the name of the route serving the current request."""
    return _route_name_var.get()


def set_correlation_id(correlation_id: str, route_name: Optional[str] = None) -> str:
    """
    Set the correlation id (and optionally the route name).

    Args:
        correlation_id: id shared by every log line of one request
        route_name: name of the route serving the request

    Returns:
        The correlation id that was set
    """
    _correlation_id_var.set(correlation_id)
    if route_name is not None:
        _route_name_var.set(route_name)
    return correlation_id


def generate_correlation_id(route_name: Optional[str] = None) -> str:
    """
    Generate and set a new correlation id (UUID) for the current context.
    """
    return set_correlation_id(str(uuid.uuid4()), route_name)


def clear_correlation_id() -> None:
    """Clear the correlation context."""
    _correlation_id_var.set(None)
    _route_name_var.set(None)
