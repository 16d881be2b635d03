"""
Route configuration model.

Declared once per route and immutable afterwards.
"""

from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..core.utils import read_json_body

MaybeAwaitable = Union[Any, Awaitable[Any]]


def no_session(request: Any) -> None:
    return None


def always_pass(props: Any) -> bool:
    return True


class RouteConfig(BaseModel):
    """
    Schemas and lifecycle callbacks of one route.

    Every callback may be a plain function or a coroutine function.
    Only ``handler`` is required.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Name used as log prefix
    name: str = "ApiRoute"
    # Require a session
    secure: bool = True

    session_schema: Any = None
    params_schema: Any = None
    search_schema: Any = None
    body_schema: Any = None

    read_session: Callable[[Any], MaybeAwaitable] = no_session
    read_body: Callable[[Any], MaybeAwaitable] = read_json_body
    # Return False to answer 403
    is_authorized: Callable[[Any], MaybeAwaitable] = always_pass
    # Return False to answer 400
    is_valid: Callable[[Any], MaybeAwaitable] = always_pass
    handler: Callable[[Any], MaybeAwaitable]

    # Four-channel logger (info/warn/error/debug); defaults to the logging module
    log: Optional[Any] = None
