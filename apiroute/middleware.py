"""
Where: apiroute/middleware.py
What: ASGI middleware marking a request's cancellation token on client disconnect.
Why: Let the route pipeline stop between stages once nobody waits for the answer.
"""

import asyncio
import contextlib
import logging
from typing import Optional

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .core.cancellation import CANCELLATION_SCOPE_KEY, CancellationToken

logger = logging.getLogger("apiroute.middleware")


class CancellationMiddleware:
    """
    Attach a CancellationToken to every HTTP request scope.

    The token is marked when an ``http.disconnect`` message is received.
    Once the request body has been fully read, a watcher task keeps
    listening for the disconnect while the app is still working.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        token = CancellationToken()
        scope[CANCELLATION_SCOPE_KEY] = token
        watcher: Optional[asyncio.Task] = None

        async def watch_disconnect() -> None:
            while True:
                message = await receive()
                if message["type"] == "http.disconnect":
                    logger.debug(
                        "Client disconnected",
                        extra={"method": scope.get("method"), "path": scope.get("path")},
                    )
                    token.cancel()
                    return

        async def receive_wrapper() -> Message:
            nonlocal watcher
            message = await receive()
            if message["type"] == "http.disconnect":
                token.cancel()
            elif (
                message["type"] == "http.request"
                and not message.get("more_body", False)
                and watcher is None
            ):
                watcher = asyncio.create_task(watch_disconnect())
            return message

        try:
            await self.app(scope, receive_wrapper, send)
        finally:
            if watcher is not None:
                watcher.cancel()
                with contextlib.suppress(asyncio.CancelledError, Exception):
                    await watcher
