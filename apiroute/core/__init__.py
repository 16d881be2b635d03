"""
Core logic package.

Provides the error taxonomy, schema adapter, response normalizer and
request-scoped helpers used by the route pipeline.
"""

from .cancellation import CancellationToken, get_cancellation_token, throw_if_aborted
from .exceptions import (
    ErrorKind,
    HttpAbortedError,
    HttpBadRequestError,
    HttpError,
    HttpForbiddenError,
    HttpUnauthorizedError,
    RouteError,
    SchemaValidationError,
)
from .responses import error_to_response, result_to_response
from .schema import CastOptions, ValidationOptions, cast_schema, validate_schema
from .utils import convert_model_to_json, sanitize_json_to_client, search_params_to_json

__all__ = [
    "CancellationToken",
    "get_cancellation_token",
    "throw_if_aborted",
    "ErrorKind",
    "HttpAbortedError",
    "HttpBadRequestError",
    "HttpError",
    "HttpForbiddenError",
    "HttpUnauthorizedError",
    "RouteError",
    "SchemaValidationError",
    "error_to_response",
    "result_to_response",
    "CastOptions",
    "ValidationOptions",
    "cast_schema",
    "validate_schema",
    "convert_model_to_json",
    "sanitize_json_to_client",
    "search_params_to_json",
]
