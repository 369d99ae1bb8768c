"""Audio Tool Gateway - closed-schema tool-call protocol for raw audio analysis.

A Python library that wraps raw audio chunk descriptors in tool-use
envelopes, validates every protocol boundary against closed schemas, and runs
the (stub) analysis either locally or through an external tool-calling
Messages API.

Usage:
    >>> from audio_tool_gateway import GatewayConfig, analyze_chunk
    >>>
    >>> config = GatewayConfig(mock_mode=True)
    >>> outcome = await analyze_chunk(chunk, config)
    >>> print(outcome.tool_result_json["quality"])
"""

__version__ = "0.1.0"

# Public library API exports
from audio_tool_gateway.core.analysis import run_audio_analysis
from audio_tool_gateway.core.client import AnthropicMessagesClient, MessagesClient, build_messages_client
from audio_tool_gateway.core.config import GatewayConfig
from audio_tool_gateway.core.operations import (
    AnalyzeOutcome,
    analyze_chunk,
    analyze_chunk_live,
    analyze_chunk_mock,
)
from audio_tool_gateway.core.schemas import (
    TOOL_NAME,
    AnalyzeRawAudioSignalInput,
    AnalyzeRawAudioSignalResult,
    ToolResultEnvelope,
    ToolUseEnvelope,
)
from audio_tool_gateway.core.tool_definition import build_tool_definition, json_schemas
from audio_tool_gateway.core.validators import (
    validate_input,
    validate_result,
    validate_tool_result_envelope,
    validate_tool_use,
)

# Export exceptions for library users
from audio_tool_gateway.core.exceptions import (
    ConfigurationError,
    GatewayError,
    ProtocolNonComplianceError,
    ResultContractError,
    SchemaViolation,
    UpstreamError,
    UpstreamInvalidResponseError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
    Violation,
)

__all__ = [
    "__version__",
    # Configuration
    "GatewayConfig",
    # Schemas
    "TOOL_NAME",
    "AnalyzeRawAudioSignalInput",
    "AnalyzeRawAudioSignalResult",
    "ToolUseEnvelope",
    "ToolResultEnvelope",
    # Validation
    "validate_input",
    "validate_result",
    "validate_tool_use",
    "validate_tool_result_envelope",
    # Tool definition
    "build_tool_definition",
    "json_schemas",
    # Operations
    "AnalyzeOutcome",
    "analyze_chunk",
    "analyze_chunk_mock",
    "analyze_chunk_live",
    "run_audio_analysis",
    # Messages API client
    "MessagesClient",
    "AnthropicMessagesClient",
    "build_messages_client",
    # Exceptions
    "GatewayError",
    "SchemaViolation",
    "Violation",
    "ResultContractError",
    "ProtocolNonComplianceError",
    "ConfigurationError",
    "UpstreamError",
    "UpstreamUnreachableError",
    "UpstreamTimeoutError",
    "UpstreamStatusError",
    "UpstreamInvalidResponseError",
]
