"""Bridge from the stdlib ``logging`` module to a Graylog client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

from ..core.levels import from_logging_level

if TYPE_CHECKING:  # pragma: no cover
    from ..core.client import Graylog

__all__ = ["GELFHandler", "build_gelf_handler", "record_to_value"]

_INTERNAL_LOGGER_PREFIX = "gelflog"

_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "asctime",
    "message",
}


def record_to_value(record: logging.LogRecord) -> Dict[str, Any]:
    """Structured log value for ``record``; extras become additional fields."""

    value: Dict[str, Any] = {
        "message": record.getMessage(),
        "timestamp": record.created,
        "logger": record.name,
        "file": record.pathname,
        "line": record.lineno,
        "function": record.funcName,
        "thread_name": record.threadName,
        "process": record.process,
    }
    for key, item in record.__dict__.items():
        if key not in _STANDARD_ATTRS and key not in value:
            value[key] = item
    if record.exc_info and record.exc_info[1] is not None:
        value["error"] = record.exc_info[1]
    if record.stack_info:
        value["stack_info"] = record.stack_info
    return value


class GELFHandler(logging.Handler):
    """Forward log records to a :class:`~gelflog.core.client.Graylog` client.

    Records emitted by gelflog's own loggers are skipped so that transport
    failures reported through ``logging`` cannot loop back into the handler.
    """

    def __init__(self, client: "Graylog", *, level: int = logging.NOTSET, background: bool | None = None) -> None:
        super().__init__(level)
        self.client = client
        self.background = background

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        name = record.name
        if name == _INTERNAL_LOGGER_PREFIX or name.startswith(_INTERNAL_LOGGER_PREFIX + "."):
            return False
        return bool(super().filter(record))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            value = record_to_value(record)
            self.client.log(value, from_logging_level(record.levelno), self.background)
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.client.flush()


def build_gelf_handler(client: "Graylog", level: int | str = logging.NOTSET) -> logging.Handler:
    handler = GELFHandler(client)
    handler.setLevel(level)
    return handler
