"""Unit tests for shared HTTP client wrappers."""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from packages.dfms_shared.envelope import MISSING
from packages.dfms_shared.errors import ErrorCategory
from packages.dfms_shared.http import (
    ApiResultError,
    AsyncHttpClient,
    ConfigError,
    HttpClient,
    NetworkError,
    UpstreamError,
    raw_response_from_httpx,
)


def test_http_client_returns_canonical_envelope() -> None:
    """A canonical 2xx body resolves to its envelope."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"code": 200, "message": "ok", "data": {"id": 1}}, request=request
        )

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        envelope = client.get("/dfm/database/1")
    finally:
        client.close()

    assert envelope.success is True
    assert envelope.data == {"id": 1}


def test_http_client_resolves_business_failure_without_raising() -> None:
    """A 2xx body reporting a non-200 code resolves with success False."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"code": 20004, "message": "no such user"}, request=request
        )

    with HttpClient(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    ) as client:
        envelope = client.post("/dfm/user/login", json={})
        with pytest.raises(ApiResultError) as exc_info:
            client.request_data("POST", "/dfm/user/login", json={})

    assert envelope.success is False
    assert envelope.code == 20004
    assert str(exc_info.value) == "no such user"
    assert exc_info.value.category is ErrorCategory.UPSTREAM_ERROR


def test_http_client_request_data_returns_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": "a"}], request=request)

    with HttpClient(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    ) as client:
        assert client.request_data("get", "/dfm/cluster/nodes") == [{"id": "a"}]


def test_http_client_maps_status_failure_to_upstream_error() -> None:
    """Non-2xx responses raise with the error envelope on ``response.data``."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "unauthorized"}, request=request)

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        with pytest.raises(UpstreamError) as exc_info:
            client.get("/dfm/system/status")
    finally:
        client.close()

    error = exc_info.value
    assert error.method == "GET"
    assert error.url == "https://example.test/dfm/system/status"
    assert error.status_code == 401
    assert error.retryable is False
    assert str(error) == "unauthorized"
    assert error.response.data.to_dict() == {
        "code": 401,
        "message": "unauthorized",
        "data": None,
        "success": False,
        "originalData": {"message": "unauthorized"},
    }


def test_http_client_marks_server_errors_retryable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable", request=request)

    with HttpClient(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    ) as client:
        with pytest.raises(UpstreamError) as exc_info:
            client.get("/dfm/system/status")

    assert exc_info.value.retryable is True
    assert exc_info.value.envelope.message == "unavailable"


def test_http_client_maps_timeout_to_network_error() -> None:
    """Timeouts normalize to code 0 with the timeout message."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        with pytest.raises(NetworkError) as exc_info:
            client.get("/dfm/database")
    finally:
        client.close()

    error = exc_info.value
    assert error.retryable is True
    assert error.status_code is None
    assert error.envelope.code == 0
    assert error.envelope.message == "request timed out"
    assert error.envelope.original_data == {"error": "timed out", "code": "ECONNABORTED"}
    assert isinstance(error.cause, httpx.ReadTimeout)


def test_http_client_maps_transport_failure_to_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with HttpClient(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    ) as client:
        with pytest.raises(NetworkError) as exc_info:
            client.get("/dfm/database")

    envelope = exc_info.value.envelope
    assert envelope.message == "network error: connection refused"
    assert envelope.original_data == {"error": "connection refused", "code": "ConnectError"}
    assert exc_info.value.category is ErrorCategory.NETWORK_ERROR


def test_http_client_maps_unsupported_scheme_to_config_error() -> None:
    """A request that cannot be dispatched is a configuration error."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.UnsupportedProtocol("Request URL has an unsupported protocol")

    with HttpClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ConfigError) as exc_info:
            client.get("ftp://example.test/file")

    envelope = exc_info.value.envelope
    assert envelope.code == -1
    assert envelope.message.startswith("request configuration error: ")
    assert exc_info.value.retryable is False
    assert exc_info.value.category is ErrorCategory.CONFIG_ERROR


def test_http_client_maps_bad_request_arguments_to_config_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={}, request=request)

    with HttpClient(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    ) as client:
        with pytest.raises(ConfigError):
            client.post("/dfm/database", json={"bad": object()})


def test_http_client_injects_default_and_extra_headers() -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return httpx.Response(200, json={"code": 200, "message": "ok"}, request=request)

    with HttpClient(
        base_url="https://example.test",
        headers={"X-Trace": "t1"},
        transport=httpx.MockTransport(handler),
    ) as client:
        client.get("/dfm/system/status", headers={"Authorization": "Bearer abc"})

    assert seen["content-type"] == "application/json"
    assert seen["x-trace"] == "t1"
    assert seen["authorization"] == "Bearer abc"


def test_http_client_logs_exchange_with_envelope_fields(
    caplog: pytest.LogCaptureFixture,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1], request=request)

    caplog.set_level(logging.INFO, logger="packages.dfms_shared.http.client")
    with HttpClient(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    ) as client:
        client.get("/dfm/cluster/nodes")

    messages = [
        record.getMessage()
        for record in caplog.records
        if record.name == "packages.dfms_shared.http.client"
    ]
    assert messages == ["API exchange completed"]


def test_raw_response_decodes_empty_text_and_json_bodies() -> None:
    """Empty bodies are undefined and non-JSON bodies stay text."""
    empty = raw_response_from_httpx(httpx.Response(204))
    text = raw_response_from_httpx(httpx.Response(200, text="pong"))
    data = raw_response_from_httpx(httpx.Response(200, json={"a": 1}))
    null = raw_response_from_httpx(httpx.Response(200, content=b"null"))

    assert empty.body is MISSING
    assert empty.status_text == "No Content"
    assert text.body == "pong"
    assert data.body == {"a": 1}
    assert null.body is None


def test_http_client_wraps_non_json_text_as_primitive() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="pong", request=request)

    with HttpClient(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    ) as client:
        envelope = client.get("/ping")

    assert envelope.data == "pong"
    assert envelope.message == "operation succeeded"


def test_async_http_client_returns_envelope_and_raises_typed_errors() -> None:
    """AsyncHttpClient mirrors the synchronous outcome mapping."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/ok":
            return httpx.Response(200, json={"code": 200, "message": "ok", "data": 1})
        return httpx.Response(500, json={"code": 50001, "msg": "boom"})

    async def run() -> tuple[object, UpstreamError]:
        async with AsyncHttpClient(
            base_url="https://example.test", transport=httpx.MockTransport(handler)
        ) as client:
            data = await client.request_data("GET", "/ok")
            try:
                await client.post("/fail", json={})
            except UpstreamError as exc:
                return data, exc
        raise AssertionError("expected UpstreamError")

    data, error = asyncio.run(run())

    assert data == 1
    assert error.status_code == 500
    assert error.envelope.code == 50001
    assert error.envelope.message == "boom"
    assert error.retryable is True


def test_async_http_client_maps_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("connect timeout", request=request)

    async def run() -> NetworkError:
        client = AsyncHttpClient(
            base_url="https://example.test", transport=httpx.MockTransport(handler)
        )
        try:
            await client.get("/slow")
        except NetworkError as exc:
            return exc
        finally:
            await client.aclose()
        raise AssertionError("expected NetworkError")

    error = asyncio.run(run())

    assert error.envelope.message == "request timed out"
