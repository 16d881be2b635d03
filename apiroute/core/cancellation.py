"""
Cooperative request cancellation.

The transport marks a per-request token when the client disconnects; the
pipeline polls it between stages. Nothing in flight is ever interrupted,
so a handler that wants to stop early must check the token itself.
"""

import threading

from fastapi import Request

from .exceptions import HttpAbortedError

# ASGI scope key holding the request's CancellationToken.
CANCELLATION_SCOPE_KEY = "apiroute.cancellation"


class CancellationToken:
    """
    Thread-safe cancellation flag.

    Example:
        >>> token = CancellationToken()
        >>> token.cancelled
        False
        >>> token.cancel()
        >>> token.cancelled
        True
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Mark the token as cancelled. Safe to call from any thread."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


def get_cancellation_token(request: Request) -> CancellationToken:
    """
    Return the token associated with the request, creating one if the
    transport did not provide it (such a request is never cancelled).
    """
    token = request.scope.get(CANCELLATION_SCOPE_KEY)
    if token is None:
        token = CancellationToken()
        request.scope[CANCELLATION_SCOPE_KEY] = token
    return token


def throw_if_aborted(token: CancellationToken) -> None:
    if token.cancelled:
        raise HttpAbortedError("ABORTED")
