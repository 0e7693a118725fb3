"""Error taxonomy for normalized API envelopes."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from . import codes, messages

if TYPE_CHECKING:
    from packages.dfms_shared.envelope import ApiEnvelope


class ErrorCategory(str, Enum):
    """Failure classes produced by response normalization."""

    EMPTY_RESPONSE = "empty_response"
    UNRECOGNIZED_FORMAT = "unrecognized_format"
    UPSTREAM_ERROR = "upstream_error"
    NETWORK_ERROR = "network_error"
    CONFIG_ERROR = "config_error"


_SYNTHESIZED_FAILURES = {
    messages.EMPTY_RESPONSE: ErrorCategory.EMPTY_RESPONSE,
    messages.EMPTY_OBJECT: ErrorCategory.EMPTY_RESPONSE,
    messages.UNRECOGNIZED_FORMAT: ErrorCategory.UNRECOGNIZED_FORMAT,
}


def categorize(envelope: ApiEnvelope) -> ErrorCategory | None:
    """Return the failure category of one envelope, or ``None`` on success.

    Synthesized 500 envelopes are recognized by their fixed message; any other
    non-success code is attributed to the backend.
    """
    if envelope.success:
        return None
    if envelope.code == codes.NETWORK_ERROR:
        return ErrorCategory.NETWORK_ERROR
    if envelope.code == codes.CONFIG_ERROR:
        return ErrorCategory.CONFIG_ERROR
    if envelope.code == codes.EMPTY_RESPONSE and envelope.data is None:
        category = _SYNTHESIZED_FAILURES.get(envelope.message)
        if category is not None:
            return category
    return ErrorCategory.UPSTREAM_ERROR
