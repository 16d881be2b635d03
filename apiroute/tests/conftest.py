from typing import Any, Dict, Iterable, Optional

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from apiroute.core.cancellation import CANCELLATION_SCOPE_KEY, CancellationToken
from apiroute.middleware import CancellationMiddleware


class RecordingLogger:
    """Four-channel logger keeping every call for assertions."""

    def __init__(self):
        self.records = []

    def info(self, *args):
        self.records.append(("info", args))

    def warn(self, *args):
        self.records.append(("warn", args))

    def error(self, *args):
        self.records.append(("error", args))

    def debug(self, *args):
        self.records.append(("debug", args))

    def calls(self, level: str):
        return [args for lvl, args in self.records if lvl == level]


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def make_client():
    """Build a TestClient serving one route behind the cancellation middleware."""

    def _make(route, path: str = "/items/{item_id}", methods: Iterable[str] = ("GET", "POST")):
        app = FastAPI()
        app.add_middleware(CancellationMiddleware)
        app.add_route(path, route, methods=list(methods))
        return TestClient(app)

    return _make


def build_request(
    method: str = "GET",
    path: str = "/items/1",
    query_string: bytes = b"",
    body: bytes = b"",
    path_params: Optional[dict] = None,
    token: Optional[CancellationToken] = None,
) -> Request:
    """Build a Request straight from an ASGI scope, without a server."""
    scope: Dict[str, Any] = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query_string,
        "headers": [(b"content-type", b"application/json")],
        "path_params": path_params or {},
    }
    if token is not None:
        scope[CANCELLATION_SCOPE_KEY] = token

    sent = False

    async def receive():
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return {"type": "http.disconnect"}

    return Request(scope, receive)


@pytest.fixture
def request_factory():
    return build_request
