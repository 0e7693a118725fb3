"""Tests for envelope error categorization and typed request errors."""

from __future__ import annotations

import pytest

from packages.dfms_shared.envelope import (
    ApiEnvelope,
    RawConfigError,
    RawHttpError,
    RawRequestError,
    RawResponse,
    normalize_body,
    normalize_error,
)
from packages.dfms_shared.errors import ErrorCategory, categorize
from packages.dfms_shared.http import (
    ApiResultError,
    ConfigError,
    NetworkError,
    UpstreamError,
    error_for_outcome,
)
from packages.dfms_shared.logging import fields, log_context


@pytest.mark.parametrize(
    ("body", "category"),
    [
        ({"code": 200, "message": "ok"}, None),
        (None, ErrorCategory.EMPTY_RESPONSE),
        ({}, ErrorCategory.EMPTY_RESPONSE),
        (object(), ErrorCategory.UNRECOGNIZED_FORMAT),
        ({"code": 40001, "message": "bad"}, ErrorCategory.UPSTREAM_ERROR),
        ({"code": 500, "message": "internal"}, ErrorCategory.UPSTREAM_ERROR),
    ],
)
def test_categorize_success_path_envelopes(body: object, category: ErrorCategory | None) -> None:
    """Synthesized failures are told apart from backend-reported ones."""
    assert categorize(normalize_body(body)) is category


def test_categorize_error_path_envelopes() -> None:
    assert categorize(normalize_error(RawRequestError("down", "ConnectError"))) is (
        ErrorCategory.NETWORK_ERROR
    )
    assert categorize(normalize_error(RawConfigError("bad url"))) is (
        ErrorCategory.CONFIG_ERROR
    )
    assert categorize(normalize_error(RawHttpError(RawResponse(status=404)))) is (
        ErrorCategory.UPSTREAM_ERROR
    )


def test_error_for_outcome_maps_raw_type_to_error_class() -> None:
    """The error class follows the raw outcome, not the envelope code."""
    raw = RawHttpError(RawResponse(status=502, body={"code": 0, "message": "odd"}))
    envelope = normalize_error(raw)

    error = error_for_outcome(raw, envelope, method="GET", url="/x")

    assert isinstance(error, UpstreamError)
    assert error.status_code == 502
    assert error.retryable is True
    assert error.response.status_code == 502
    assert error.response.data is envelope


def test_error_for_outcome_network_and_config() -> None:
    network_raw = RawRequestError("reset", "ReadError")
    config_raw = RawConfigError("bad")

    network = error_for_outcome(network_raw, normalize_error(network_raw))
    config = error_for_outcome(config_raw, normalize_error(config_raw))

    assert isinstance(network, NetworkError)
    assert network.retryable is True
    assert isinstance(config, ConfigError)
    assert config.retryable is False
    assert network.status_code is None


@pytest.mark.parametrize(("status", "retryable"), [(429, True), (500, True), (404, False)])
def test_upstream_error_retryable_by_status(status: int, retryable: bool) -> None:
    raw = RawHttpError(RawResponse(status=status))
    error = error_for_outcome(raw, normalize_error(raw))

    assert error.retryable is retryable


def test_api_result_error_exposes_envelope_message() -> None:
    envelope = ApiEnvelope(code=20002, message="wrong password")
    error = ApiResultError(envelope=envelope, method="POST", url="/dfm/user/login")

    assert str(error) == "wrong password"
    assert error.category is ErrorCategory.UPSTREAM_ERROR


def test_request_errors_propagate_through_log_context() -> None:
    """Errors keep their envelope and traceback when raised in a bound log context."""
    raw = RawHttpError(RawResponse(status=401, body={"message": "unauthorized"}))
    envelope = normalize_error(raw)

    with pytest.raises(UpstreamError) as exc_info:
        with log_context({fields.HTTP_METHOD: "GET"}):
            raise error_for_outcome(raw, envelope)

    assert exc_info.value.envelope is envelope
    assert exc_info.value.__traceback__ is not None


def test_api_result_error_propagates_through_log_context() -> None:
    envelope = ApiEnvelope(code=50010, message="node offline")

    with pytest.raises(ApiResultError) as exc_info:
        with log_context({fields.HTTP_URL: "/dfm/system/status"}):
            raise ApiResultError(envelope=envelope)

    assert str(exc_info.value) == "node offline"
