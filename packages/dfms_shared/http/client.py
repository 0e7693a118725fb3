"""Shared HTTP client wrappers over httpx that resolve to ``ApiEnvelope``.

Each exchange is classified into exactly one raw outcome and normalized:

- request construction failure -> ``RawConfigError`` -> ``ConfigError``
- transport failure after dispatch -> ``RawRequestError`` -> ``NetworkError``
- non-2xx response -> ``RawHttpError`` -> ``UpstreamError``
- 2xx response -> envelope returned to the caller
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from packages.dfms_shared.envelope import (
    MISSING,
    ApiEnvelope,
    RawConfigError,
    RawError,
    RawHttpError,
    RawRequestError,
    RawResponse,
    normalize_body,
    normalize_error,
)
from packages.dfms_shared.errors import categorize
from packages.dfms_shared.logging import fields, log_context

from .errors import ApiRequestError, ApiResultError, error_for_outcome

logger = logging.getLogger(__name__)

TIMEOUT_ERROR_CODE = "ECONNABORTED"

# Failures raised by ``build_request`` before anything is dispatched.
_REQUEST_BUILD_ERRORS = (httpx.InvalidURL, httpx.UnsupportedProtocol, TypeError, ValueError)


def _response_text(response: httpx.Response) -> str:
    """Return response text without raising secondary decode errors."""
    try:
        return response.text
    except Exception:
        return ""


def raw_response_from_httpx(response: httpx.Response) -> RawResponse:
    """Decode one httpx response into a transport-agnostic ``RawResponse``.

    An empty body becomes ``MISSING``; a body that is not JSON is kept as text.
    """
    body: Any = MISSING
    if response.content:
        try:
            body = response.json()
        except ValueError:
            body = _response_text(response)
    return RawResponse(
        status=response.status_code,
        status_text=response.reason_phrase,
        body=body,
        headers=dict(response.headers.items()),
    )


def raw_error_from_exception(exc: Exception) -> RawError:
    """Classify one exception raised while sending a request."""
    message = str(exc) or type(exc).__name__
    if isinstance(exc, httpx.TimeoutException):
        return RawRequestError(message=message, code=TIMEOUT_ERROR_CODE)
    if isinstance(exc, httpx.UnsupportedProtocol):
        return RawConfigError(message=message)
    if isinstance(exc, httpx.RequestError):
        return RawRequestError(message=message, code=type(exc).__name__)
    return RawConfigError(message=message)


def _failure(
    raw: RawError,
    *,
    method: str,
    url: str,
    cause: Exception | None = None,
) -> ApiRequestError:
    """Normalize one failed exchange, log it and return the typed error."""
    envelope = normalize_error(raw)
    error = error_for_outcome(raw, envelope, method=method, url=url, cause=cause)
    with log_context(
        {
            fields.EVENT: fields.API_EXCHANGE_EVENT,
            fields.STATUS_CODE: error.status_code,
            fields.ENVELOPE_CODE: envelope.code,
            fields.SUCCESS: False,
            fields.ERROR_CATEGORY: error.category.value if error.category else None,
        }
    ):
        logger.warning("API exchange failed: %s", envelope.message)
    return error


def _complete(response: httpx.Response, *, method: str, url: str) -> ApiEnvelope:
    """Turn one received response into an envelope or raise the typed error."""
    raw = raw_response_from_httpx(response)
    if not raw.ok:
        raise _failure(RawHttpError(response=raw), method=method, url=url)

    envelope = normalize_body(raw.body)
    category = categorize(envelope)
    with log_context(
        {
            fields.EVENT: fields.API_EXCHANGE_EVENT,
            fields.STATUS_CODE: raw.status,
            fields.ENVELOPE_CODE: envelope.code,
            fields.SUCCESS: envelope.success,
            fields.ERROR_CATEGORY: category.value if category else None,
        }
    ):
        if envelope.success:
            logger.info("API exchange completed")
        else:
            logger.warning("API exchange completed: %s", envelope.message)
    return envelope


def unwrap(envelope: ApiEnvelope, *, method: str = "", url: str = "") -> Any:
    """Return ``envelope.data`` or raise ``ApiResultError`` when not successful."""
    if not envelope.success:
        raise ApiResultError(envelope=envelope, method=method, url=url)
    return envelope.data


class HttpClient:
    """Thin synchronous wrapper over ``httpx.Client`` returning envelopes."""

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = False,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Create a new shared HTTP client wrapper."""
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Content-Type": "application/json", **dict(headers or {})},
            follow_redirects=follow_redirects,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        """Return the configured base URL."""
        return str(self._client.base_url)

    def close(self) -> None:
        """Close underlying transport resources when owned."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpClient:
        """Enter context manager scope."""
        return self

    def __exit__(self, *_: object) -> None:
        """Exit context manager scope and close client."""
        self.close()

    def request(self, method: str, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one request and return its envelope.

        Raises ``ApiRequestError`` (``UpstreamError``, ``NetworkError`` or
        ``ConfigError``) carrying the error-path envelope.
        """
        method = method.upper()
        with log_context({fields.HTTP_METHOD: method, fields.HTTP_URL: url}):
            try:
                request = self._client.build_request(method=method, url=url, **kwargs)
            except _REQUEST_BUILD_ERRORS as exc:
                raise _failure(
                    RawConfigError(message=str(exc) or type(exc).__name__),
                    method=method,
                    url=url,
                    cause=exc,
                ) from exc

            try:
                response = self._client.send(request)
            except httpx.RequestError as exc:
                raise _failure(
                    raw_error_from_exception(exc),
                    method=method,
                    url=str(request.url),
                    cause=exc,
                ) from exc

            return _complete(response, method=method, url=str(request.url))

    def get(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one GET request."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one POST request."""
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one PUT request."""
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one PATCH request."""
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one DELETE request."""
        return self.request("DELETE", url, **kwargs)

    def request_data(self, method: str, url: str, **kwargs: Any) -> Any:
        """Issue one request and return the payload of a successful envelope."""
        return unwrap(self.request(method, url, **kwargs), method=method.upper(), url=url)


class AsyncHttpClient:
    """Thin asynchronous wrapper over ``httpx.AsyncClient`` returning envelopes."""

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create a new shared asynchronous HTTP client wrapper."""
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Content-Type": "application/json", **dict(headers or {})},
            follow_redirects=follow_redirects,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close underlying transport resources when owned."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context manager scope."""
        return self

    async def __aexit__(self, *_: object) -> None:
        """Exit async context manager scope and close client."""
        await self.aclose()

    async def request(self, method: str, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one request and return its envelope; see ``HttpClient.request``."""
        method = method.upper()
        with log_context({fields.HTTP_METHOD: method, fields.HTTP_URL: url}):
            try:
                request = self._client.build_request(method=method, url=url, **kwargs)
            except _REQUEST_BUILD_ERRORS as exc:
                raise _failure(
                    RawConfigError(message=str(exc) or type(exc).__name__),
                    method=method,
                    url=url,
                    cause=exc,
                ) from exc

            try:
                response = await self._client.send(request)
            except httpx.RequestError as exc:
                raise _failure(
                    raw_error_from_exception(exc),
                    method=method,
                    url=str(request.url),
                    cause=exc,
                ) from exc

            return _complete(response, method=method, url=str(request.url))

    async def get(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one GET request."""
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one POST request."""
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one PUT request."""
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one PATCH request."""
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> ApiEnvelope:
        """Issue one DELETE request."""
        return await self.request("DELETE", url, **kwargs)

    async def request_data(self, method: str, url: str, **kwargs: Any) -> Any:
        """Issue one request and return the payload of a successful envelope."""
        envelope = await self.request(method, url, **kwargs)
        return unwrap(envelope, method=method.upper(), url=url)
