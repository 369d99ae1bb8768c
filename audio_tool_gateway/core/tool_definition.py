"""Tool definition and JSON Schemas derived from the pydantic models.

Nothing here is written by hand: every schema is generated from
``core.schemas`` so the registered tool cannot drift from what the gateway
actually accepts.
"""

from typing import Any

from audio_tool_gateway.core.schemas import (
    TOOL_NAME,
    AnalyzeRawAudioSignalInput,
    AnalyzeRawAudioSignalResult,
    ToolResultEnvelope,
    ToolUseEnvelope,
)

TOOL_DESCRIPTION = (
    "Low-latency raw audio analysis for emotional tone, hardware acoustics, "
    "anomaly detection, and code intent without requiring transcription."
)


def input_json_schema() -> dict[str, Any]:
    """JSON Schema of the tool input, as accepted by tool-calling APIs."""
    return AnalyzeRawAudioSignalInput.model_json_schema()


def build_tool_definition() -> dict[str, Any]:
    """Return the ``{name, description, input_schema}`` tool registration."""
    return {
        "name": TOOL_NAME,
        "description": TOOL_DESCRIPTION,
        "input_schema": input_json_schema(),
    }


def json_schemas() -> dict[str, dict[str, Any]]:
    """JSON Schemas of all four protocol entities, keyed by contract name."""
    return {
        "AnalyzeRawAudioSignalInput": input_json_schema(),
        "AnalyzeRawAudioSignalResult": AnalyzeRawAudioSignalResult.model_json_schema(),
        "AnalyzeRawAudioSignalToolUse": ToolUseEnvelope.model_json_schema(),
        "AnalyzeRawAudioSignalToolResultEnvelope": ToolResultEnvelope.model_json_schema(),
    }
