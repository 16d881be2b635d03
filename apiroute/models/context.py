"""
Per-request models.

RequestContext is created at entry and discarded with the response.
ApiRouteHandlerProps is what authorization, validity and the handler see.
"""

import time
from typing import Any

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field

from ..core.cancellation import CancellationToken
from ..core.logging_config import ScopedLogger


class RequestContext(BaseModel):
    """State owned by exactly one in-flight request."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    correlation_id: str
    request: Request
    cancellation: CancellationToken
    log: ScopedLogger
    started_at: float = Field(default_factory=time.perf_counter)

    def runtime_ms(self) -> float:
        return round((time.perf_counter() - self.started_at) * 1000, 2)


class ApiRouteHandlerProps(BaseModel):
    """
    Validated and coerced request inputs.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Original request
    request: Request
    # Decoded user session
    session: Any = None
    # Path parameters
    params: Any = None
    # Decoded query string
    search_params: Any = None
    # Parsed body
    body: Any = None
