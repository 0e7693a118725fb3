"""Typed configuration models for DFMS client settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

CONFIG_DIR = Path.home() / ".config" / "dfms"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "dfms.yaml"
DEFAULT_TOKEN_PATH = CONFIG_DIR / "tokens.json"


class ApiSettings(BaseModel):
    """Backend connection settings."""

    base_url: str = "http://localhost:8080"
    timeout_seconds: float = Field(default=10.0, gt=0)
    use_mock: bool = False
    retries: int = Field(default=3, ge=0)
    mock_delay_seconds: float = Field(default=0.3, ge=0)


class AuthSettings(BaseModel):
    """Where the bearer token is kept between invocations."""

    token_key: str = Field(default="auth_token", min_length=1)
    token_path: Path = DEFAULT_TOKEN_PATH


class PaginationSettings(BaseModel):
    """Default page sizes offered to list calls."""

    default_page_size: int = Field(default=10, gt=0)
    page_size_options: list[int] = Field(default_factory=lambda: [10, 20, 50, 100])

    @model_validator(mode="after")
    def _default_must_be_offered(self) -> PaginationSettings:
        """Reject a default page size missing from the offered options."""
        if self.default_page_size not in self.page_size_options:
            raise ValueError(
                "pagination.default_page_size must be one of pagination.page_size_options"
            )
        return self


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "dfms-console"
    environment: str = "dev"


class DfmsSettings(BaseSettings):
    """Root settings resolved from init > env > YAML > defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DFMS_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
        yaml_file=DEFAULT_CONFIG_PATH,
        yaml_file_encoding="utf-8",
    )

    api: ApiSettings = Field(default_factory=ApiSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply DFMS precedence: init > env > yaml."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
        )
