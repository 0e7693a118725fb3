"""Public DFMS SDK interface for CLI and script callers."""

from packages.dfms_sdk.auth import (
    FileTokenStore,
    InMemoryTokenStore,
    LoginError,
    TokenStore,
    get_user_info,
    is_token_valid,
    login,
    logout,
)
from packages.dfms_sdk.client import DfmsClient, RetryPolicy
from packages.dfms_sdk.mock import MockBackend, MockRepository, mock_response
from packages.dfms_sdk.resources import (
    ClusterApi,
    DatabaseApi,
    DataModelApi,
    GeospatialApi,
    MonitoringApi,
    RelationalApi,
    SecurityApi,
    StorageApi,
    SystemApi,
    TimeseriesApi,
    VectorApi,
)
from packages.dfms_sdk.types import PaginatedData, PaginationParams, QueryParams
from packages.dfms_shared.http import (
    ApiRequestError,
    ApiResultError,
    ConfigError,
    NetworkError,
    UpstreamError,
)

__all__ = [
    "ApiRequestError",
    "ApiResultError",
    "ClusterApi",
    "ConfigError",
    "DataModelApi",
    "DatabaseApi",
    "DfmsClient",
    "FileTokenStore",
    "GeospatialApi",
    "InMemoryTokenStore",
    "LoginError",
    "MockBackend",
    "MockRepository",
    "MonitoringApi",
    "NetworkError",
    "PaginatedData",
    "PaginationParams",
    "QueryParams",
    "RelationalApi",
    "RetryPolicy",
    "SecurityApi",
    "StorageApi",
    "SystemApi",
    "TimeseriesApi",
    "TokenStore",
    "UpstreamError",
    "VectorApi",
    "get_user_info",
    "is_token_valid",
    "login",
    "logout",
    "mock_response",
]
