"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .context import ApiRouteHandlerProps, RequestContext
from .route import RouteConfig, always_pass, no_session

__all__ = [
    "ApiRouteHandlerProps",
    "RequestContext",
    "RouteConfig",
    "always_pass",
    "no_session",
]
