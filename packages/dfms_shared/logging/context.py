"""Structured logging context kept in a ``ContextVar``.

Values bound here are attached to every record by ``ContextFilter``. Using a
context variable keeps concurrent async exchanges from seeing each other's
fields.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

_LOG_CONTEXT: ContextVar[dict[str, str]] = ContextVar("dfms_log_context", default={})


def get_context() -> dict[str, str]:
    """Return a copy of the current logging context."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Bind values into the current context, stringified; ``None`` is skipped."""
    current = _LOG_CONTEXT.get().copy()
    current.update({key: str(value) for key, value in values.items() if value is not None})
    _LOG_CONTEXT.set(current)


def clear_context(*keys: str) -> None:
    """Remove the given keys, or everything when no keys are given."""
    if not keys:
        _LOG_CONTEXT.set({})
        return
    current = _LOG_CONTEXT.get().copy()
    for key in keys:
        current.pop(key, None)
    _LOG_CONTEXT.set(current)


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind ``values`` for the duration of a block, then restore."""
    token = _LOG_CONTEXT.set(_LOG_CONTEXT.get().copy())
    try:
        bind_context(**dict(values))
        yield
    finally:
        _LOG_CONTEXT.reset(token)
