"""Transport-agnostic raw outcomes consumed by response normalization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union


class _Missing:
    """Sentinel type for a response body that was never provided."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class RawResponse:
    """One inbound HTTP response before normalization.

    ``body`` is the decoded JSON value, ``None`` for a JSON ``null`` and
    ``MISSING`` when the response carried no body at all.
    """

    status: int
    status_text: str = ""
    body: Any = MISSING
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Return ``True`` for 2xx statuses."""
        return 200 <= self.status < 300


@dataclass(frozen=True)
class RawHttpError:
    """Failure where the backend answered with a non-2xx status."""

    response: RawResponse


@dataclass(frozen=True)
class RawRequestError:
    """Failure where the request was sent but no response arrived."""

    message: str
    code: str | None = None


@dataclass(frozen=True)
class RawConfigError:
    """Failure raised before the request reached the transport."""

    message: str


RawError = Union[RawHttpError, RawRequestError, RawConfigError]
