"""Configuration management - loads environment variables into typed settings."""

import logging
from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from audio_tool_gateway.core.config import GatewayConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Host for the server to listen on")
    port: int = Field(default=3000, description="Port for the server to listen on")

    # Mock Mode
    mock_mode: str = Field(
        default="0",
        description="Simulate the external agent locally (1 = enabled, 0 = disabled)",
    )

    # External Messages API
    anthropic_api_key: str | None = Field(
        default=None,
        description="API key for the external Messages API. Required unless MOCK_MODE is enabled",
    )
    anthropic_base_url: str = Field(
        default="https://api.anthropic.com",
        description="Base URL of the external Messages API",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-5",
        description="Model used for both tool-calling requests",
    )
    anthropic_max_tokens: int = Field(
        default=500,
        description="max_tokens for both tool-calling requests",
    )
    anthropic_version: str = Field(
        default="2023-06-01",
        description="Value of the anthropic-version request header",
    )

    # Timeout Configuration
    upstream_timeout_s: float = Field(
        default=300.0,
        description="Total timeout for Messages API requests (seconds)",
    )
    upstream_connect_timeout_s: float = Field(
        default=10.0,
        description="Connection timeout for Messages API requests (seconds)",
    )

    # Request Limits
    allow_origins: str = Field(
        default="",
        description="CORS allowed origins (comma-separated list, empty = no CORS)",
    )
    max_body_bytes: int = Field(
        default=10_000_000,
        description="Maximum accepted request body size for /analyze (bytes)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError(f"port must be between 1 and 65535, got {v}")
        return v

    @field_validator("upstream_timeout_s", "upstream_connect_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    @field_validator("anthropic_max_tokens", "max_body_bytes")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Validate size limits are positive."""
        if v <= 0:
            raise ValueError(f"Value must be positive, got {v}")
        return v

    @field_validator("anthropic_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"URL must use http or https scheme, got {v}")
        if not parsed.netloc:
            raise ValueError(f"URL must have a valid host, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {v}")
        return v.upper()

    @field_validator("mock_mode")
    @classmethod
    def validate_boolean_string(cls, v: str) -> str:
        """Validate boolean string format."""
        v_lower = v.lower().strip()
        if v_lower not in ("0", "1", "true", "false", "yes", "no"):
            raise ValueError(f"Boolean field must be '0', '1', 'true', 'false', 'yes', or 'no', got {v}")
        return v

    @model_validator(mode="after")
    def validate_live_mode_credentials(self) -> "Settings":
        """Validate that an API key is present when the external agent is called for real."""
        if not self.mock_mode_bool and not self.anthropic_api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY is required when MOCK_MODE is disabled. "
                "Please set ANTHROPIC_API_KEY or MOCK_MODE=true in your .env file."
            )
        return self

    @property
    def allow_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if not self.allow_origins:
            return []
        return [origin.strip() for origin in self.allow_origins.split(",") if origin.strip()]

    @property
    def mock_mode_bool(self) -> bool:
        """Convert mock_mode string to boolean."""
        v = self.mock_mode.lower().strip()
        return v in ("1", "true", "yes")

    def get_log_level(self) -> int:
        """Convert log level string to logging constant."""
        return getattr(logging, self.log_level, logging.INFO)

    def to_gateway_config(self) -> GatewayConfig:
        """Build the library config used by the operations layer."""
        return GatewayConfig(
            mock_mode=self.mock_mode_bool,
            anthropic_api_key=self.anthropic_api_key,
            anthropic_base_url=self.anthropic_base_url,
            anthropic_model=self.anthropic_model,
            anthropic_max_tokens=self.anthropic_max_tokens,
            anthropic_version=self.anthropic_version,
            timeout_s=self.upstream_timeout_s,
            connect_timeout_s=self.upstream_connect_timeout_s,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Settings are loaded from environment variables and .env file on first call.
    Subsequent calls return the cached instance.

    Raises:
        ValueError: If required settings are missing or invalid.

    Returns:
        Settings: The validated settings instance.
    """
    try:
        return Settings()
    except Exception as e:
        raise ValueError(
            f"Failed to load configuration: {e}\n"
            "Please check your .env file and ensure all required settings are present and valid."
        ) from e
