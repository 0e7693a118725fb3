"""Synchronous DFMS API client for CLI and script callers."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from packages.dfms_shared.config import ApiSettings, DfmsSettings
from packages.dfms_shared.envelope import ApiEnvelope
from packages.dfms_shared.http import ApiRequestError, HttpClient, UpstreamError, unwrap
from packages.dfms_shared.logging import fields, log_context

from . import endpoints
from .auth import InMemoryTokenStore, TokenStore
from .mock import MockBackend, MockRepository

logger = logging.getLogger(__name__)

UNAUTHORIZED_STATUS = 401


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff for failures whose error reports ``retryable``.

    Attributes:
        max_attempts: Total attempts including the first one.
        retry_status_codes: Upstream statuses worth re-issuing.
        retry_methods: HTTP methods safe to re-issue. Non-idempotent
            methods such as POST and PATCH are sent once.
        backoff_factor: Delay before attempt ``n + 1`` is
            ``backoff_factor * 2 ** (n - 1)`` seconds.
        max_backoff: Upper bound on a single delay in seconds.
    """

    max_attempts: int = 3
    retry_status_codes: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "PUT", "DELETE", "OPTIONS"})
    )
    backoff_factor: float = 0.5
    max_backoff: float = 10.0

    @classmethod
    def from_settings(cls, api: ApiSettings) -> RetryPolicy:
        """Build a policy allowing ``api.retries`` re-issues after the first attempt."""
        return cls(max_attempts=api.retries + 1)

    def should_retry(self, error: ApiRequestError) -> bool:
        """Return ``True`` when ``error`` is worth another attempt."""
        if error.method.upper() not in self.retry_methods:
            return False
        if not error.retryable:
            return False
        if isinstance(error, UpstreamError):
            return error.status_code in self.retry_status_codes
        return True

    def delay_for(self, attempt: int) -> float:
        """Return the delay after failed attempt number ``attempt`` (1-based)."""
        return min(self.backoff_factor * (2 ** (attempt - 1)), self.max_backoff)


class DfmsClient:
    """DFMS API client with bearer auth, 401 eviction and optional retries.

    Every call resolves to an ``ApiEnvelope`` or raises ``ApiRequestError``.
    With ``api.use_mock`` enabled (and no explicit transport) requests are
    served by an in-memory ``MockBackend`` instead of the network.
    """

    def __init__(
        self,
        *,
        settings: DfmsSettings | None = None,
        token_store: TokenStore | None = None,
        transport: httpx.BaseTransport | None = None,
        retry: RetryPolicy | None = None,
        mock_backend: MockBackend | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Create one client from settings, building the transport when needed."""
        self._settings = DfmsSettings() if settings is None else settings
        self._token_store = InMemoryTokenStore() if token_store is None else token_store
        self._retry = retry
        self._sleep = sleep
        self.mock_backend: MockBackend | None = None
        api = self._settings.api

        if transport is None and (api.use_mock or mock_backend is not None):
            if mock_backend is None:
                mock_backend = MockBackend(
                    MockRepository({path: [] for path in endpoints.MOCK_COLLECTIONS}),
                    delay_seconds=api.mock_delay_seconds,
                )
            self.mock_backend = mock_backend
            transport = mock_backend.transport()

        self._http = HttpClient(
            base_url=api.base_url,
            timeout_seconds=api.timeout_seconds,
            transport=transport,
        )

    @property
    def settings(self) -> DfmsSettings:
        return self._settings

    @property
    def is_mock(self) -> bool:
        return self.mock_backend is not None

    @property
    def token(self) -> str | None:
        """Return the stored bearer token, if any."""
        return self._token_store.get(self._settings.auth.token_key)

    def set_token(self, token: str) -> None:
        self._token_store.set(self._settings.auth.token_key, token)

    def clear_token(self) -> None:
        self._token_store.remove(self._settings.auth.token_key)

    def close(self) -> None:
        """Close underlying HTTP resources."""
        self._http.close()

    def __enter__(self) -> DfmsClient:
        """Enter context manager scope."""
        return self

    def __exit__(self, *_: object) -> None:
        """Exit context manager scope and close HTTP resources."""
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> ApiEnvelope:
        """Issue one request, retrying per the configured policy.

        A 401 response removes the stored token before the error propagates.
        """
        attempt = 0
        with log_context({fields.MOCK: True} if self.is_mock else {}):
            while True:
                attempt += 1
                try:
                    return self._http.request(
                        method, path, headers=self._auth_headers(headers), **kwargs
                    )
                except ApiRequestError as exc:
                    if exc.status_code == UNAUTHORIZED_STATUS:
                        logger.info("token rejected; removing stored token")
                        self.clear_token()
                    if not self._should_retry(exc, attempt):
                        raise
                    self._wait_before_retry(exc, attempt)

    def get(self, path: str, **kwargs: Any) -> ApiEnvelope:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> ApiEnvelope:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> ApiEnvelope:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> ApiEnvelope:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> ApiEnvelope:
        return self.request("DELETE", path, **kwargs)

    def request_data(self, method: str, path: str, **kwargs: Any) -> Any:
        """Issue one request and return the payload of a successful envelope.

        Raises:
            ApiResultError: the exchange succeeded but the envelope did not.
        """
        envelope = self.request(method, path, **kwargs)
        return unwrap(envelope, method=method.upper(), url=path)

    def _auth_headers(self, headers: Mapping[str, str] | None) -> dict[str, str]:
        merged = dict(headers or {})
        token = self.token
        if token:
            merged["Authorization"] = f"Bearer {token}"
        return merged

    def _should_retry(self, error: ApiRequestError, attempt: int) -> bool:
        if self._retry is None or attempt >= self._retry.max_attempts:
            return False
        return self._retry.should_retry(error)

    def _wait_before_retry(self, error: ApiRequestError, attempt: int) -> None:
        assert self._retry is not None
        delay = self._retry.delay_for(attempt)
        with log_context({fields.EVENT: fields.API_RETRY_EVENT, fields.ATTEMPT: attempt}):
            logger.warning(
                "%s %s failed: %s; retrying in %.1fs (attempt %d/%d)",
                error.method,
                error.url,
                error,
                delay,
                attempt,
                self._retry.max_attempts,
            )
        self._sleep(delay)
