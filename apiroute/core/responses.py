"""
Response normalizer.

Maps a handler return value, or an error raised by any stage, to the
response sent back through the transport.
"""

from typing import Any, Optional, Tuple

from fastapi import status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import CANCELLED_STATUS_CODE, ErrorKind, error_kind, is_http_error
from .utils import convert_model_to_json, sanitize_json_to_client

# ASGI has no reason phrase; the status text travels as a header.
STATUS_TEXT_HEADER = "x-status-text"


class ValidationErrorResponse(JSONResponse):
    """JSON violation report annotated with a machine readable status text."""

    def __init__(
        self,
        content: Any,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        status_text: Optional[str] = None,
    ) -> None:
        headers = {STATUS_TEXT_HEADER: status_text} if status_text else None
        super().__init__(content, status_code=status_code, headers=headers)
        self.status_text = status_text


def result_to_response(result: Any) -> Response:
    """
    Map a successful handler result to a response.

    Priority: native response (passthrough), None (empty 200),
    str (plain text 200), anything else (sanitized JSON 200).
    """
    if isinstance(result, Response):
        return result

    if result is None:
        return Response(status_code=status.HTTP_200_OK)

    if isinstance(result, str):
        return PlainTextResponse(result, status_code=status.HTTP_200_OK)

    content = sanitize_json_to_client(convert_model_to_json(result))
    return JSONResponse(content, status_code=status.HTTP_200_OK)


def _http_error_response(error: BaseException) -> Response:
    if isinstance(error, StarletteHTTPException):
        return Response(status_code=error.status_code, headers=error.headers)

    status_code = getattr(error, "status_code", None) or status.HTTP_500_INTERNAL_SERVER_ERROR
    body = getattr(error, "body", None)
    if body is None or isinstance(body, (str, bytes)):
        return Response(body, status_code=status_code)
    return JSONResponse(convert_model_to_json(body), status_code=status_code)


def error_to_response(
    error: BaseException, aborted: bool = False
) -> Tuple[Response, Optional[BaseException]]:
    """
    Map an error raised by the pipeline to a response.

    Args:
        error: the raised error
        aborted: whether the request's cancellation token is set

    Returns:
        (response, error to log). The error to log is None when the outcome
        is a client disconnect, which is not a failure.
    """
    kind = error_kind(error)

    if kind is ErrorKind.ABORTED or aborted:
        return Response(status_code=CANCELLED_STATUS_CODE), None

    if kind is ErrorKind.VALIDATION:
        content = sanitize_json_to_client(convert_model_to_json(error.to_json()))
        return ValidationErrorResponse(content, status_text=error.status_text), error

    if is_http_error(error):
        return _http_error_response(error), error

    # Never leak the underlying error to the client.
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR), error


__all__ = [
    "STATUS_TEXT_HEADER",
    "ValidationErrorResponse",
    "error_to_response",
    "result_to_response",
]
