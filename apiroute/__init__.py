"""
apiroute

Wraps route handlers in a fixed pipeline: session, authentication, input
validation, authorization, business validity, handler, response mapping.
"""

from .config import RouteSettings, config
from .core.cancellation import CancellationToken, get_cancellation_token
from .core.exceptions import (
    CANCELLED_STATUS_CODE,
    ErrorKind,
    HttpAbortedError,
    HttpBadRequestError,
    HttpError,
    HttpForbiddenError,
    HttpUnauthorizedError,
    RouteError,
    SchemaValidationError,
)
from .core.logging_config import CustomJsonFormatter, StdlibRouteLogger, setup_logging
from .core.responses import STATUS_TEXT_HEADER
from .core.schema import CastOptions, ValidationOptions
from .core.utils import ResolvedSearchParams, read_json_body
from .middleware import CancellationMiddleware
from .models import ApiRouteHandlerProps, RouteConfig
from .pipeline import ApiRoute, api_route

__all__ = [
    "ApiRoute",
    "ApiRouteHandlerProps",
    "CANCELLED_STATUS_CODE",
    "CancellationMiddleware",
    "CancellationToken",
    "CastOptions",
    "CustomJsonFormatter",
    "ErrorKind",
    "HttpAbortedError",
    "HttpBadRequestError",
    "HttpError",
    "HttpForbiddenError",
    "HttpUnauthorizedError",
    "ResolvedSearchParams",
    "RouteConfig",
    "RouteError",
    "RouteSettings",
    "STATUS_TEXT_HEADER",
    "SchemaValidationError",
    "StdlibRouteLogger",
    "ValidationOptions",
    "api_route",
    "config",
    "get_cancellation_token",
    "read_json_body",
    "setup_logging",
]
