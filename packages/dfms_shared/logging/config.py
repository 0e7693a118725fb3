"""Stdout logging configuration for DFMS clients and tools.

Records always carry the structured fields bound through ``context`` so one
API exchange (method, url, envelope code) can be followed across lines.
Output is newline-delimited JSON by default and a plain key=value rendering
for interactive CLI use.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, TYPE_CHECKING, Any

from . import fields
from .context import bind_context, get_context

if TYPE_CHECKING:
    from packages.dfms_shared.config import LoggingSettings

# Third-party loggers that are noisy at INFO for every request.
_QUIET_LOGGERS = ("httpx", "httpcore")


class ContextFilter(logging.Filter):
    """Attach the current logging context to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.context = get_context()
        return True


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per record with stable core fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload.update(context)
        if record.exc_info:
            payload[fields.EXCEPTION] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Human-readable formatter with context appended as ``key=value``."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = getattr(record, "context", None)
        if not context:
            return message
        suffix = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{message} {suffix}"


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    level: str | None = None,
    json_output: bool | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install a single stdout handler on the root logger and return it.

    Explicit keyword arguments win over ``settings``. Calling this again
    replaces the previous handler instead of stacking a second one.
    """
    resolved_level = (level or (settings.level if settings else "INFO")).upper()
    resolved_json = (
        json_output
        if json_output is not None
        else (settings.json_output if settings else True)
    )

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setLevel(resolved_level)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if resolved_json else PlainFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(resolved_level)
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if settings is not None:
        bind_context(
            **{
                fields.SERVICE: settings.service,
                fields.ENVIRONMENT: settings.environment,
            }
        )
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a standard library logger."""
    return logging.getLogger(name)
