"""Public shared HTTP client API for DFMS packages."""

from .client import (
    AsyncHttpClient,
    HttpClient,
    raw_error_from_exception,
    raw_response_from_httpx,
    unwrap,
)
from .errors import (
    ApiRequestError,
    ApiResultError,
    ConfigError,
    ErrorResponse,
    NetworkError,
    UpstreamError,
    error_for_outcome,
)

__all__ = [
    "ApiRequestError",
    "ApiResultError",
    "AsyncHttpClient",
    "ConfigError",
    "ErrorResponse",
    "HttpClient",
    "NetworkError",
    "UpstreamError",
    "error_for_outcome",
    "raw_error_from_exception",
    "raw_response_from_httpx",
    "unwrap",
]
