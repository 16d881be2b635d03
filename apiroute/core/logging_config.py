"""
Logging Configuration

Provides:
- CustomJsonFormatter: one JSON object per record, correlated per request
- setup_logging: YAML dictConfig loader with environment substitution
- StdlibRouteLogger: four-channel route logger backed by the logging module
- ScopedLogger: prefixes every line with route name and correlation id
"""

import json
import logging
import logging.config
import os
import string
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Protocol

import yaml

from .request_context import get_correlation_id, get_route_name


class CustomJsonFormatter(logging.Formatter):
    """
    JSON Formatter.

    Fields:
      - _time: ISO8601 timestamp (millisecond precision)
      - level: Log level
      - logger: Logger name (e.g. apiroute.route)
      - message: Log message
      - route: Name of the route serving the request
      - correlation_id: Per-request correlation id
    """

    standard_attrs = {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        route = getattr(record, "route", None) or get_route_name()

        log_data = {
            "_time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if route:
            log_data["route"] = route
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        # Include extra fields
        for key, value in record.__dict__.items():
            if key not in self.standard_attrs and not key.startswith("_") and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(config_path: Optional[str] = None, log_level: Optional[str] = None):
    """
    Load the YAML config, substitute environment variables, and initialize logging.
    """
    from ..config import config

    config_path = config_path or config.LOG_CONFIG_PATH
    log_level = log_level or config.LOG_LEVEL

    if not os.path.exists(config_path):
        logging.basicConfig(level=log_level)
        return

    with open(config_path, "r", encoding="utf-8") as f:
        # Substitute environment variables using string.Template.
        # Supports ${LOG_LEVEL} format.
        template = string.Template(f.read())

        mapping = os.environ.copy()
        mapping.setdefault("LOG_LEVEL", log_level)

        content = template.safe_substitute(mapping)
        logging.config.dictConfig(yaml.safe_load(content))


class RouteLogger(Protocol):
    """Four independent channels, each taking any number of loggable values."""

    def info(self, *args: Any) -> None: ...

    def warn(self, *args: Any) -> None: ...

    def error(self, *args: Any) -> None: ...

    def debug(self, *args: Any) -> None: ...


def _render_default(value: Any) -> Any:
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return repr(value)


def render_log_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, BaseException):
        return _render_default(value)
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, ensure_ascii=False, default=_render_default)
        except (TypeError, ValueError):
            return repr(value)
    return str(value)


def _find_exception(args: tuple) -> Optional[BaseException]:
    for arg in args:
        if isinstance(arg, BaseException):
            return arg
        if isinstance(arg, Mapping):
            for value in arg.values():
                if isinstance(value, BaseException):
                    return value
    return None


class StdlibRouteLogger:
    """Default route logger writing to a ``logging.Logger``."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("apiroute.route")

    def _emit(self, level: int, args: tuple, exc_info: Any = None) -> None:
        if not self.logger.isEnabledFor(level):
            return
        message = " ".join(render_log_value(arg) for arg in args)
        self.logger.log(level, message, exc_info=exc_info)

    def info(self, *args: Any) -> None:
        self._emit(logging.INFO, args)

    def warn(self, *args: Any) -> None:
        self._emit(logging.WARNING, args)

    def error(self, *args: Any) -> None:
        exc = _find_exception(args)
        exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
        self._emit(logging.ERROR, args, exc_info)

    def debug(self, *args: Any) -> None:
        self._emit(logging.DEBUG, args)


class ScopedLogger:
    """Prefix every call with ``<route name> ~ <correlation id> ~``."""

    def __init__(self, log: Optional[RouteLogger], name: str, correlation_id: str):
        self._log = log
        self.name = name
        self.correlation_id = correlation_id

    def info(self, *args: Any) -> None:
        if self._log is not None:
            self._log.info(self.name, "~", self.correlation_id, "~", *args)

    def warn(self, *args: Any) -> None:
        if self._log is not None:
            self._log.warn(self.name, "~", self.correlation_id, "~", *args)

    def error(self, *args: Any) -> None:
        if self._log is not None:
            self._log.error(self.name, "~", self.correlation_id, "~", *args)

    def debug(self, *args: Any) -> None:
        if self._log is not None:
            self._log.debug(self.name, "~", self.correlation_id, "~", *args)
