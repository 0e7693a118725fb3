"""Typed errors raised by the shared HTTP client wrappers.

Every error carries the normalized ``ApiEnvelope`` of the failed exchange so
callers can inspect ``error.response.data`` (or ``error.envelope``) the same
way regardless of failure class.
"""

from __future__ import annotations

from dataclasses import dataclass

from packages.dfms_shared.envelope import (
    ApiEnvelope,
    RawConfigError,
    RawError,
    RawHttpError,
    RawRequestError,
)
from packages.dfms_shared.errors import ErrorCategory, categorize


@dataclass(frozen=True)
class ErrorResponse:
    """Response view attached to a failed exchange."""

    status_code: int | None
    data: ApiEnvelope


@dataclass(eq=False)
class ApiRequestError(Exception):
    """Base error for an exchange that failed on the error path."""

    envelope: ApiEnvelope
    method: str = ""
    url: str = ""
    status_code: int | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        """Return the normalized error message."""
        return self.envelope.message

    @property
    def response(self) -> ErrorResponse:
        """Return the response view whose ``data`` is the error envelope."""
        return ErrorResponse(status_code=self.status_code, data=self.envelope)

    @property
    def category(self) -> ErrorCategory | None:
        """Return the failure category of the carried envelope."""
        return categorize(self.envelope)

    @property
    def retryable(self) -> bool:
        """Return ``True`` when re-issuing the request may succeed."""
        return False


@dataclass(eq=False)
class UpstreamError(ApiRequestError):
    """Backend answered with a non-2xx status."""

    @property
    def retryable(self) -> bool:
        status = self.status_code or 0
        return status >= 500 or status == 429


@dataclass(eq=False)
class NetworkError(ApiRequestError):
    """Request was sent but no response arrived."""

    @property
    def retryable(self) -> bool:
        return True


@dataclass(eq=False)
class ConfigError(ApiRequestError):
    """Request could not be dispatched at all."""


@dataclass(eq=False)
class ApiResultError(Exception):
    """A 2xx exchange whose envelope reports ``success == False``."""

    envelope: ApiEnvelope
    method: str = ""
    url: str = ""

    def __str__(self) -> str:
        """Return the envelope message."""
        return self.envelope.message

    @property
    def category(self) -> ErrorCategory | None:
        """Return the failure category of the carried envelope."""
        return categorize(self.envelope)


_RAW_ERROR_TO_ERROR: dict[type, type[ApiRequestError]] = {
    RawHttpError: UpstreamError,
    RawRequestError: NetworkError,
    RawConfigError: ConfigError,
}


def error_for_outcome(
    raw: RawError,
    envelope: ApiEnvelope,
    *,
    method: str = "",
    url: str = "",
    cause: Exception | None = None,
) -> ApiRequestError:
    """Build the typed error matching one raw failure and its envelope."""
    status_code = raw.response.status if isinstance(raw, RawHttpError) else None
    return _RAW_ERROR_TO_ERROR[type(raw)](
        envelope=envelope,
        method=method,
        url=url,
        status_code=status_code,
        cause=cause,
    )
