"""Public API for shared DFMS configuration."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_TOKEN_PATH,
    ApiSettings,
    AuthSettings,
    DfmsSettings,
    LoggingSettings,
    PaginationSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_TOKEN_PATH",
    "ApiSettings",
    "AuthSettings",
    "DfmsSettings",
    "LoggingSettings",
    "PaginationSettings",
    "load_settings",
]
