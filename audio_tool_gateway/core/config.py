"""Simple configuration for core library usage."""

from dataclasses import dataclass


@dataclass
class GatewayConfig:
    """Configuration for the audio tool gateway core library.

    This is a simplified config suitable for library usage without
    environment variable loading.

    Args:
        mock_mode: Simulate the external agent locally instead of calling it
        anthropic_api_key: API key for the external Messages API (live mode only)
        anthropic_base_url: Base URL of the external Messages API
        anthropic_model: Model name sent with every Messages request
        anthropic_max_tokens: max_tokens sent with every Messages request
        anthropic_version: Value of the anthropic-version header
        timeout_s: Total timeout for upstream requests in seconds
        connect_timeout_s: Connection timeout for upstream requests in seconds
    """

    mock_mode: bool = False
    anthropic_api_key: str | None = None
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_model: str = "claude-sonnet-4-5"
    anthropic_max_tokens: int = 500
    anthropic_version: str = "2023-06-01"
    timeout_s: float = 300.0
    connect_timeout_s: float = 10.0
