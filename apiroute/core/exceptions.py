"""
Route error taxonomy.

Every error the pipeline raises on purpose carries a kind, a status code and
an optional pre-built body. The response normalizer dispatches on the kind.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import status
from starlette.exceptions import HTTPException as StarletteHTTPException

# Internal sentinel: the client went away, nothing to report.
CANCELLED_STATUS_CODE = status.HTTP_418_IM_A_TEAPOT


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    BAD_REQUEST = "BAD_REQUEST"
    ABORTED = "ABORTED"
    HTTP = "HTTP"
    VALIDATION = "VALIDATION"
    INTERNAL = "INTERNAL"


class RouteError(Exception):
    """Base class for errors raised by the route pipeline."""

    kind: ErrorKind = ErrorKind.HTTP

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class HttpError(RouteError):
    """Error carrying an HTTP status code and an optional response body."""

    kind = ErrorKind.HTTP

    def __init__(self, message: str, status_code: Optional[int], body: Any = None):
        super().__init__(message, status_code, body)


class HttpUnauthorizedError(HttpError):
    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "UNAUTHORIZED"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class HttpForbiddenError(HttpError):
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "FORBIDDEN"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class HttpBadRequestError(HttpError):
    kind = ErrorKind.BAD_REQUEST

    def __init__(self, message: str = "BAD_REQUEST", body: Any = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, body)


class HttpAbortedError(HttpError):
    """Raised when the client disconnected before the response was ready."""

    kind = ErrorKind.ABORTED

    def __init__(self, message: str = "ABORTED"):
        super().__init__(message, CANCELLED_STATUS_CODE)


class SchemaValidationError(RouteError):
    """
    Structured schema failure.

    Holds every violation, not only the first, and the name of the input
    it came from once the pipeline tags it.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, violations: List[Dict[str, str]], source: Optional[str] = None):
        self.violations = violations
        self.source = source
        count = len(violations)
        message = f"{count} validation error{'' if count == 1 else 's'}"
        super().__init__(message, status.HTTP_400_BAD_REQUEST)

    @property
    def status_text(self) -> Optional[str]:
        if not self.source:
            return None
        return f"INVALID_{self.source.upper()}"

    def to_json(self) -> Dict[str, Any]:
        """Serialize for the client. Only paths, types and messages are exposed."""
        return {
            "name": "ValidationError",
            "path": self.source,
            "message": str(self),
            "errors": [
                f"{v['path']}: {v['message']}" if v["path"] else v["message"]
                for v in self.violations
            ],
            "inner": [dict(v) for v in self.violations],
        }


def error_kind(error: BaseException) -> ErrorKind:
    if isinstance(error, RouteError):
        return error.kind
    # Raised by handlers written against FastAPI.
    if isinstance(error, StarletteHTTPException):
        return ErrorKind.HTTP
    return ErrorKind.INTERNAL


def is_http_error(error: BaseException) -> bool:
    return error_kind(error) not in (ErrorKind.VALIDATION, ErrorKind.INTERNAL)
