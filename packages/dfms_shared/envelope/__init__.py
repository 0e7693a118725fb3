"""Public shared envelope API for DFMS clients."""

from .envelope import ApiEnvelope
from .normalize import (
    envelope_from_variant,
    normalize_body,
    normalize_error,
    normalize_response,
)
from .raw import (
    MISSING,
    RawConfigError,
    RawError,
    RawHttpError,
    RawRequestError,
    RawResponse,
)
from .variants import BodyVariant, classify_body

__all__ = [
    "ApiEnvelope",
    "BodyVariant",
    "MISSING",
    "RawConfigError",
    "RawError",
    "RawHttpError",
    "RawRequestError",
    "RawResponse",
    "classify_body",
    "envelope_from_variant",
    "normalize_body",
    "normalize_error",
    "normalize_response",
]
