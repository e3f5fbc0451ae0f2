"""Centralized configuration management with environment-aware defaults.

This module implements the configuration layer using Pydantic Settings,
providing type-safe configuration with validation and environment variable
support.

Features:
- **Type safety**: All configuration values are validated and typed
- **Environment variables**: Supports .env files and environment overrides
- **Nested configuration**: Uses __ delimiter (e.g. PIPELINE_CONFIG__ECHO_CORRELATION_ID)
- **Caching**: Configuration is cached for performance

Configuration sources (in order of precedence):
1. Environment variables
2. .env file in project root
3. Default values in model definitions
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "api_key",
            "authorization",
        ],
        description="Field names to redact",
    )


class PipelineConfig(BaseModel):
    """Runtime behavior of compiled route handlers."""

    validation_error_message: str = Field(
        default="Invalid input.",
        description="Message returned when a schema rejects path, query or body input",
    )
    invalid_body_message: str = Field(
        default="Invalid JSON body provided.",
        description="Message returned when a payload cannot be parsed",
    )
    internal_error_message: str = Field(
        default="An internal server error occurred.",
        description="Message returned for unclassified errors",
    )
    correlation_id_header: str = Field(
        default="X-Correlation-ID",
        min_length=1,
        description="Header carrying the correlation ID",
    )
    echo_correlation_id: bool = Field(
        default=True,
        description="Add the correlation ID header to pipeline-built responses",
    )

    @field_validator(
        "validation_error_message",
        "invalid_body_message",
        "internal_error_message",
        mode="after",
    )
    @classmethod
    def non_blank(cls, v: str) -> str:
        """Reject blank response messages."""
        if not v.strip():
            msg = "Response messages must not be blank"
            raise ValueError(msg)
        return v


class Settings(BaseSettings):
    """Main settings class for the package."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = Field(default="api-builder", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=False, description="Debug mode flag")

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )
    pipeline_config: PipelineConfig = Field(
        default_factory=PipelineConfig, description="Route handler configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json"]:
        """Auto-detect log formatter based on environment."""
        # Managed runtimes ingest structured logs
        if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
            return "json"

        if self.environment == "development":
            return "console"
        return "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
