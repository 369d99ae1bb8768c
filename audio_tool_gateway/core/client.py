"""Client for the external tool-calling Messages API."""

import logging
from typing import Any, Protocol

import httpx

from audio_tool_gateway.core.config import GatewayConfig
from audio_tool_gateway.core.exceptions import (
    ConfigurationError,
    UpstreamInvalidResponseError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)

logger = logging.getLogger(__name__)

_MAX_ERROR_BODY = 500


class MessagesClient(Protocol):
    """Send one conversation turn and get back the response message."""

    async def create_message(self, request_body: dict[str, Any]) -> dict[str, Any]: ...


class AnthropicMessagesClient:
    """httpx-backed ``MessagesClient`` for the Anthropic Messages API."""

    def __init__(self, config: GatewayConfig):
        self.config = config

    @property
    def url(self) -> str:
        return f"{self.config.anthropic_base_url.rstrip('/')}/v1/messages"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.config.anthropic_api_key or "",
            "anthropic-version": self.config.anthropic_version,
        }

    async def create_message(self, request_body: dict[str, Any]) -> dict[str, Any]:
        """
        Send a Messages request and return the parsed response.

        ``model`` and ``max_tokens`` are filled from the config when the
        request does not set them. No retries are performed.

        Args:
            request_body: Messages API request body

        Returns:
            The decoded response message (with its ``content`` blocks)

        Raises:
            UpstreamUnreachableError: If connection to upstream fails
            UpstreamTimeoutError: If upstream request times out
            UpstreamStatusError: If upstream answers with a non-2xx status
            UpstreamInvalidResponseError: If upstream does not return JSON
        """
        body = {
            "model": self.config.anthropic_model,
            "max_tokens": self.config.anthropic_max_tokens,
            **request_body,
        }
        base_url = self.config.anthropic_base_url

        timeout = httpx.Timeout(
            self.config.timeout_s,
            connect=self.config.connect_timeout_s,
        )

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                logger.debug(f"Sending Messages request to {self.url}")
                response = await client.post(self.url, json=body, headers=self._headers())

        except httpx.TimeoutException as e:
            logger.error(f"Timeout error to upstream {self.url}: {e}")
            raise UpstreamTimeoutError(
                "Messages API did not respond in time",
                upstream=base_url,
            ) from e

        except (httpx.ConnectError, httpx.NetworkError) as e:
            logger.error(f"Connection error to upstream {self.url}: {e}")
            raise UpstreamUnreachableError(
                f"Connection to upstream failed: {str(e)}",
                upstream=base_url,
            ) from e

        if response.status_code >= 400:
            detail = response.text[:_MAX_ERROR_BODY]
            logger.error(f"Upstream {self.url} returned {response.status_code}: {detail}")
            raise UpstreamStatusError(
                f"Messages API returned HTTP {response.status_code}: {detail}",
                status_code=response.status_code,
                upstream=base_url,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Failed to parse upstream response: {e}")
            raise UpstreamInvalidResponseError("Messages API returned invalid JSON", upstream=base_url) from e


def build_messages_client(config: GatewayConfig) -> MessagesClient:
    """Build the live Messages client, refusing to run without credentials."""
    if not config.anthropic_api_key:
        raise ConfigurationError("anthropic_api_key is required when mock_mode is disabled.")
    return AnthropicMessagesClient(config)
