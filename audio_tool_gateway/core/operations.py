"""High-level operations: one audio chunk through the tool-call protocol."""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from audio_tool_gateway.core.analysis import run_audio_analysis
from audio_tool_gateway.core.client import MessagesClient, build_messages_client
from audio_tool_gateway.core.config import GatewayConfig
from audio_tool_gateway.core.exceptions import ProtocolNonComplianceError, ResultContractError, SchemaViolation
from audio_tool_gateway.core.logging import bind_session
from audio_tool_gateway.core.schemas import TOOL_NAME, AnalyzeRawAudioSignalResult, ToolUseEnvelope
from audio_tool_gateway.core.tool_definition import build_tool_definition
from audio_tool_gateway.core.validators import (
    check_mode_payload,
    dump,
    validate_input,
    validate_tool_result_envelope,
    validate_tool_use,
)

logger = logging.getLogger(__name__)

MOCK_FINAL_CONTENT: list[dict[str, Any]] = [
    {"type": "text", "text": "[mock] Analysis complete. All validation passed."}
]

PROMPT_PREFIX = f"Call {TOOL_NAME} with this exact JSON input:\n"


@dataclass
class AnalyzeOutcome:
    """Validated artifacts of one processed chunk."""

    tool_use: dict[str, Any]
    tool_result_json: dict[str, Any]
    final_content: list[Any] = field(default_factory=list)
    mock: bool = False

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.mock:
            body["mock"] = True
        body["tool_use"] = self.tool_use
        body["tool_result_json"] = self.tool_result_json
        body["claude_final"] = self.final_content
        return body


def mock_tool_use_id() -> str:
    """Time-derived id for a locally synthesised tool_use block."""
    return f"mock_toolu_{int(time.time() * 1000)}"


def build_tool_result_envelope(tool_use_id: str, result: AnalyzeRawAudioSignalResult) -> dict[str, Any]:
    """Wrap an analysis result as a tool_result block answering ``tool_use_id``."""
    return {
        "type": "tool_result",
        "tool_use_id": tool_use_id,
        "content": [{"type": "json", "json": dump(result)}],
    }


def _run_tool(tool_use: ToolUseEnvelope) -> tuple[AnalyzeRawAudioSignalResult, dict[str, Any]]:
    """Analyze a validated tool_use and return the result with its validated envelope.

    Any schema failure on this side is a defect in the analysis, reported as
    ``ResultContractError`` rather than blamed on the caller.
    """
    result = run_audio_analysis(tool_use.input)
    envelope = build_tool_result_envelope(tool_use.id, result)

    try:
        validated = validate_tool_result_envelope(envelope)
        check_mode_payload(tool_use.input, validated.content[0].json_)
    except SchemaViolation as e:
        logger.error("Analysis broke the result contract: %s", e.message)
        raise ResultContractError(f"Analysis produced a non-conformant result: {e.message}", e.violations) from e

    logger.debug("Tool result validated for tool_use %s", tool_use.id)
    return result, envelope


async def analyze_chunk_mock(tool_input: Any) -> AnalyzeOutcome:
    """Process a chunk with a locally synthesised tool_use block.

    No external call is made. The input is validated as part of the
    synthesised envelope before any analysis runs.
    """
    tool_use = validate_tool_use(
        {
            "type": "tool_use",
            "id": mock_tool_use_id(),
            "name": TOOL_NAME,
            "input": tool_input,
        }
    )

    with bind_session(tool_use.input.session_id):
        logger.debug("Mock tool_use %s validated (chunk %d)", tool_use.id, tool_use.input.chunk_id)
        result, _ = _run_tool(tool_use)

    return AnalyzeOutcome(
        tool_use=dump(tool_use),
        tool_result_json=dump(result),
        final_content=list(MOCK_FINAL_CONTENT),
        mock=True,
    )


async def analyze_chunk_live(tool_input: Any, client: MessagesClient) -> AnalyzeOutcome:
    """
    Process a chunk through the external agent.

    The input is validated before it is sent anywhere. The first call forces
    the single registered tool; the second carries the validated tool_result
    back and its content is returned unmodified.

    Args:
        tool_input: Raw tool input as received from the client
        client: Messages API client

    Returns:
        AnalyzeOutcome with the agent's final content

    Raises:
        SchemaViolation: If the input or the agent's tool_use block is malformed
        ProtocolNonComplianceError: If the agent does not emit a tool_use block
        ResultContractError: If the analysis result breaks its contract
    """
    validate_input(tool_input)

    tools = [build_tool_definition()]
    messages: list[dict[str, Any]] = [
        {
            "role": "user",
            "content": [
                {
                    "type": "text",
                    "text": PROMPT_PREFIX + json.dumps(tool_input, separators=(",", ":")),
                }
            ],
        }
    ]

    first = await client.create_message(
        {
            "tools": tools,
            "tool_choice": {"type": "tool", "name": TOOL_NAME},
            "messages": messages,
        }
    )

    content = first.get("content") or []
    tool_use_block = next(
        (block for block in content if isinstance(block, dict) and block.get("type") == "tool_use"),
        None,
    )
    if tool_use_block is None:
        logger.warning("Agent response had no tool_use block (stop_reason=%s)", first.get("stop_reason"))
        raise ProtocolNonComplianceError("Claude did not emit tool_use", content=content)

    tool_use = validate_tool_use(tool_use_block)

    with bind_session(tool_use.input.session_id):
        logger.debug("Agent tool_use %s validated (chunk %d)", tool_use.id, tool_use.input.chunk_id)
        result, envelope = _run_tool(tool_use)

        second = await client.create_message(
            {
                "tools": tools,
                "messages": [
                    *messages,
                    {"role": "assistant", "content": content},
                    {"role": "user", "content": [envelope]},
                ],
            }
        )

    return AnalyzeOutcome(
        tool_use=dump(tool_use),
        tool_result_json=dump(result),
        final_content=second.get("content", []),
    )


async def analyze_chunk(
    tool_input: Any,
    config: GatewayConfig,
    client: MessagesClient | None = None,
) -> AnalyzeOutcome:
    """Process one chunk in mock or live mode according to ``config``."""
    # TODO: buffer chunks per session_id and drop the buffer on final_chunk or after an idle timeout.
    if config.mock_mode:
        return await analyze_chunk_mock(tool_input)

    if client is None:
        client = build_messages_client(config)
    return await analyze_chunk_live(tool_input, client)
