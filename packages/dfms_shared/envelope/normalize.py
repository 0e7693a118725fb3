"""Response normalization into the canonical ``ApiEnvelope``.

Every raw transport outcome maps to exactly one envelope:

- 2xx responses go through ``classify_body`` and one converter per variant.
- Non-2xx responses, transport failures and request configuration failures
  go through ``normalize_error``.

Neither entry point raises; signalling failure to callers is the job of the
HTTP client that owns the exchange.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, assert_never

from packages.dfms_shared.errors import codes, messages

from .envelope import ApiEnvelope
from .raw import (
    MISSING,
    RawConfigError,
    RawError,
    RawHttpError,
    RawRequestError,
    RawResponse,
)
from .variants import (
    Absent,
    BodyVariant,
    Canonical,
    EmptyObject,
    ListBody,
    PartialCode,
    PlainObject,
    Primitive,
    Unrecognized,
    classify_body,
    is_number,
)

logger = logging.getLogger(__name__)

_ERROR_MESSAGE_KEYS = ("message", "error", "msg")


def normalize_body(body: Any) -> ApiEnvelope:
    """Normalize one decoded 2xx response body."""
    variant = classify_body(body)
    logger.debug("Response body classified as %s", type(variant).__name__)
    return envelope_from_variant(variant)


def normalize_response(response: RawResponse) -> ApiEnvelope:
    """Normalize one HTTP response, routing non-2xx statuses to the error path."""
    if response.ok:
        return normalize_body(response.body)
    return normalize_error(RawHttpError(response=response))


def envelope_from_variant(variant: BodyVariant) -> ApiEnvelope:
    """Convert one classified body variant into an envelope."""
    if isinstance(variant, Absent):
        return ApiEnvelope(code=codes.EMPTY_RESPONSE, message=messages.EMPTY_RESPONSE)

    if isinstance(variant, EmptyObject):
        return ApiEnvelope(
            code=codes.EMPTY_RESPONSE,
            message=messages.EMPTY_OBJECT,
            original_data=variant.original,
        )

    if isinstance(variant, Primitive):
        return ApiEnvelope(
            code=codes.SUCCESS,
            message=messages.OPERATION_SUCCEEDED,
            data=variant.value,
        )

    if isinstance(variant, Canonical):
        return ApiEnvelope(
            code=variant.code,
            message=variant.message,
            data=None if variant.data is MISSING else variant.data,
            extra=variant.extra,
        )

    if isinstance(variant, PartialCode):
        message = (
            messages.DEFAULT_SUCCESS
            if variant.code == codes.SUCCESS
            else messages.DEFAULT_COMPLETED
        )
        if variant.data is not MISSING:
            return ApiEnvelope(
                code=variant.code,
                message=message,
                data=variant.data,
                extra=variant.remainder,
            )
        return ApiEnvelope(
            code=variant.code,
            message=message,
            data=variant.remainder or None,
        )

    if isinstance(variant, ListBody):
        return ApiEnvelope(
            code=codes.SUCCESS,
            message=messages.LIST_RETRIEVED,
            data=variant.items,
        )

    if isinstance(variant, PlainObject):
        return ApiEnvelope(
            code=codes.SUCCESS,
            message=messages.OPERATION_SUCCEEDED,
            data=variant.value,
        )

    if isinstance(variant, Unrecognized):
        return ApiEnvelope(
            code=codes.UNRECOGNIZED_FORMAT,
            message=messages.UNRECOGNIZED_FORMAT,
            original_data=variant.value,
        )

    assert_never(variant)


def normalize_error(error: RawError) -> ApiEnvelope:
    """Normalize one failed exchange into an error envelope."""
    if isinstance(error, RawHttpError):
        envelope = _http_error_envelope(error.response)
    elif isinstance(error, RawRequestError):
        envelope = _request_error_envelope(error)
    elif isinstance(error, RawConfigError):
        envelope = ApiEnvelope(
            code=codes.CONFIG_ERROR,
            message=f"{messages.CONFIG_ERROR_PREFIX}: {error.message}",
            original_data={"error": error.message},
        )
    else:
        assert_never(error)

    logger.debug(
        "Error outcome %s normalized with code %s", type(error).__name__, envelope.code
    )
    return envelope


def _http_error_envelope(response: RawResponse) -> ApiEnvelope:
    """Build an envelope for a non-2xx HTTP response."""
    body = response.body
    code: int | float = response.status
    if isinstance(body, Mapping) and is_number(body.get("code")):
        code = body["code"]
    return ApiEnvelope(
        code=code,
        message=_http_error_message(response),
        original_data=None if body is MISSING else body,
    )


def _http_error_message(response: RawResponse) -> str:
    """Search the error body for a human-readable message."""
    body = response.body
    if isinstance(body, Mapping):
        for key in _ERROR_MESSAGE_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value != "":
                return value
    elif isinstance(body, str) and body != "":
        return body
    return f"HTTP {response.status}: {response.status_text}"


def _request_error_envelope(error: RawRequestError) -> ApiEnvelope:
    """Build an envelope for a request that never got a response."""
    if error.code in codes.TIMEOUT_CODES:
        message = messages.REQUEST_TIMED_OUT
    else:
        message = f"{messages.NETWORK_ERROR_PREFIX}: {error.message}"
    return ApiEnvelope(
        code=codes.NETWORK_ERROR,
        message=message,
        original_data={"error": error.message, "code": error.code},
    )
