"""
Where: apiroute/pipeline.py
What: Route entry point running session, validation, authorization and handler stages.
Why: Give every route one fixed execution order and one error-to-response mapping.
"""

import inspect
import logging
from typing import Any, Mapping, Optional

from fastapi import Request
from fastapi.responses import Response
from starlette.types import Receive, Scope, Send

from .config import RouteSettings
from .config import config as default_config
from .core.cancellation import get_cancellation_token, throw_if_aborted
from .core.exceptions import HttpBadRequestError, HttpForbiddenError, HttpUnauthorizedError
from .core.logging_config import RouteLogger, ScopedLogger, StdlibRouteLogger
from .core.request_context import clear_correlation_id, generate_correlation_id
from .core.responses import error_to_response, result_to_response
from .core.schema import cast_schema, validate_schema
from .core.utils import search_params_to_json
from .models import ApiRouteHandlerProps, RequestContext, RouteConfig

logger = logging.getLogger("apiroute.route")


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class ApiRoute:
    """
    Route endpoint.

    An ApiRoute is an ASGI app, so it can be registered with
    ``app.add_route(path, route, methods=[...])`` or a Starlette ``Route``.
    ``handle(request, params)`` runs the pipeline directly.
    Settings default to the process-wide ``config``.
    """

    def __init__(self, route: RouteConfig, settings: Optional[RouteSettings] = None):
        self.route = route
        self.settings = settings or default_config
        self.log: RouteLogger = route.log or StdlibRouteLogger(logger)

    @property
    def name(self) -> str:
        return self.route.name

    def _create_context(self, request: Request) -> RequestContext:
        correlation_id = generate_correlation_id(self.route.name)
        return RequestContext(
            correlation_id=correlation_id,
            request=request,
            cancellation=get_cancellation_token(request),
            log=ScopedLogger(self.log, self.route.name, correlation_id),
        )

    def _check_schema(self, value: Any, schema: Any, source: str) -> None:
        if schema is None:
            return
        result = validate_schema(value, schema, self.settings.VALIDATION_OPTIONS)
        if result is not True:
            result.source = source
            raise result

    def _cast(self, value: Any, schema: Any) -> Any:
        if schema is None:
            return value
        return cast_schema(value, schema, self.settings.CAST_OPTIONS)

    async def _read_session(self, ctx: RequestContext) -> Any:
        route = self.route
        session = await _resolve(route.read_session(ctx.request))

        if session is not None and route.session_schema is not None:
            result = validate_schema(session, route.session_schema, self.settings.VALIDATION_OPTIONS)
            if result is not True:
                # An invalid session is an absent session.
                result.source = "session"
                ctx.log.debug("INVALID_SESSION", result.to_json())
                session = None

        return session

    async def _build_props(self, ctx: RequestContext, params: Mapping[str, Any]) -> ApiRouteHandlerProps:
        route = self.route
        request = ctx.request

        session = await self._read_session(ctx)

        if route.secure and session is None:
            raise HttpUnauthorizedError("NO_SESSION")

        throw_if_aborted(ctx.cancellation)

        self._check_schema(params, route.params_schema, "params")

        throw_if_aborted(ctx.cancellation)

        query = search_params_to_json(request)
        self._check_schema(query, route.search_schema, "searchParams")

        throw_if_aborted(ctx.cancellation)

        body = await _resolve(route.read_body(request))
        self._check_schema(body, route.body_schema, "body")

        throw_if_aborted(ctx.cancellation)

        return ApiRouteHandlerProps(
            request=request,
            session=self._cast(session, route.session_schema) if session is not None else None,
            params=self._cast(params, route.params_schema),
            search_params=self._cast(query, route.search_schema),
            body=self._cast(body, route.body_schema),
        )

    async def _run(self, ctx: RequestContext, params: Mapping[str, Any]) -> Response:
        route = self.route
        props = await self._build_props(ctx, params)

        if not await _resolve(route.is_authorized(props)):
            raise HttpForbiddenError()

        throw_if_aborted(ctx.cancellation)

        if not await _resolve(route.is_valid(props)):
            raise HttpBadRequestError()

        throw_if_aborted(ctx.cancellation)

        result = await _resolve(route.handler(props))

        throw_if_aborted(ctx.cancellation)

        return result_to_response(result)

    def _finalize(
        self, ctx: RequestContext, response: Optional[Response], error: Optional[BaseException]
    ) -> None:
        runtime_ms = ctx.runtime_ms()

        if response is None:
            # Interrupted by the host (e.g. task cancellation); nothing was sent.
            ctx.log.warn("interrupted , runtimeMs =", runtime_ms)
        elif error is None:
            ctx.log.info("statusCode =", response.status_code, ", runtimeMs =", runtime_ms)
        else:
            ctx.log.error(
                {
                    "error": error,
                    "statusCode": response.status_code,
                    "runtimeMs": runtime_ms,
                }
            )

    async def handle(self, request: Request, params: Optional[Mapping[str, Any]] = None) -> Response:
        """
        Run the pipeline for one request.

        Args:
            request: inbound request
            params: path parameters (defaults to ``request.path_params``)

        Returns:
            Exactly one response; ordinary exceptions never escape
        """
        ctx = self._create_context(request)
        if params is None:
            params = dict(request.path_params)

        ctx.log.info(f"= {request.method}: {request.url.path} ~ params =", params)

        response: Optional[Response] = None
        error: Optional[BaseException] = None
        try:
            response = await self._run(ctx, params)
        except Exception as e:
            response, error = error_to_response(e, ctx.cancellation.cancelled)
        finally:
            self._finalize(ctx, response, error)
            clear_correlation_id()

        return response

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive, send)
        response = await self.handle(request)
        await response(scope, receive, send)


def api_route(settings: Optional[RouteSettings] = None, **options: Any) -> ApiRoute:
    """
    Build a route endpoint.

    Args:
        settings: overrides the process-wide settings for this route only
        **options: RouteConfig fields (``handler`` is required)

    Returns:
        ApiRoute ready to be registered with an ASGI router
    """
    return ApiRoute(RouteConfig(**options), settings=settings)
