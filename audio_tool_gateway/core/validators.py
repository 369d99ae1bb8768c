"""Validation gateway: untyped data in, schema-conformant models out.

Every function here is pure. A mismatch raises ``SchemaViolation`` listing
every failing field; nothing is silently dropped or coerced.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from audio_tool_gateway.core.exceptions import SchemaViolation, Violation
from audio_tool_gateway.core.schemas import (
    MODE_PAYLOAD_FIELDS,
    AnalyzeRawAudioSignalInput,
    AnalyzeRawAudioSignalResult,
    ToolResultEnvelope,
    ToolUseEnvelope,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

_MAX_ACTUAL_LEN = 80


def _describe(value: Any) -> str:
    text = repr(value)
    if len(text) > _MAX_ACTUAL_LEN:
        text = text[: _MAX_ACTUAL_LEN - 3] + "..."
    return text


def violations_from_error(exc: ValidationError) -> list[Violation]:
    """Flatten a pydantic error into (path, expected, actual) triples."""
    violations = []
    for err in exc.errors(include_url=False):
        path = ".".join(str(part) for part in err["loc"])
        if err["type"] == "missing":
            actual = "missing"
        else:
            actual = _describe(err.get("input"))
        violations.append(Violation(path=path, expected=err["msg"], actual=actual))
    return violations


def _validate(model: type[ModelT], schema_name: str, value: Any) -> ModelT:
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise SchemaViolation(schema_name, violations_from_error(e)) from e


def validate_input(value: Any) -> AnalyzeRawAudioSignalInput:
    """Validate a raw tool input against the closed input schema."""
    return _validate(AnalyzeRawAudioSignalInput, "AnalyzeRawAudioSignalInput", value)


def validate_result(value: Any) -> AnalyzeRawAudioSignalResult:
    """Validate an analysis result against the closed result schema."""
    return _validate(AnalyzeRawAudioSignalResult, "AnalyzeRawAudioSignalResult", value)


def validate_tool_use(value: Any) -> ToolUseEnvelope:
    """Validate a tool_use block.

    ``type`` must be exactly ``"tool_use"`` and ``name`` exactly
    ``"analyze_raw_audio_signal"``; the embedded input is held to the closed
    input schema.
    """
    return _validate(ToolUseEnvelope, "AnalyzeRawAudioSignalToolUse", value)


def validate_tool_result_envelope(value: Any) -> ToolResultEnvelope:
    """Validate a tool_result envelope; ``content`` must be a non-empty list of json items."""
    return _validate(ToolResultEnvelope, "AnalyzeRawAudioSignalToolResultEnvelope", value)


def check_mode_payload(tool_input: AnalyzeRawAudioSignalInput, result: AnalyzeRawAudioSignalResult) -> None:
    """
    Enforce the coupling between a request and its result.

    The result must echo the session and chunk identifiers, carry exactly the
    payload named by ``analysis_mode`` and no other, and carry a
    ``final_summary`` if and only if the chunk was marked final.

    Raises:
        SchemaViolation: With one violation per broken rule.
    """
    violations = []

    if result.session_id != tool_input.session_id:
        violations.append(Violation("session_id", repr(tool_input.session_id), repr(result.session_id)))
    if result.chunk_id != tool_input.chunk_id:
        violations.append(Violation("chunk_id", repr(tool_input.chunk_id), repr(result.chunk_id)))

    for field in MODE_PAYLOAD_FIELDS:
        present = getattr(result, field) is not None
        if field == tool_input.analysis_mode and not present:
            violations.append(Violation(field, f"present for analysis_mode={field}", "absent"))
        elif field != tool_input.analysis_mode and present:
            violations.append(
                Violation(field, f"absent for analysis_mode={tool_input.analysis_mode}", "present")
            )

    has_summary = result.final_summary is not None
    if tool_input.final_chunk and not has_summary:
        violations.append(Violation("final_summary", "present when final_chunk is true", "absent"))
    elif not tool_input.final_chunk and has_summary:
        violations.append(Violation("final_summary", "absent when final_chunk is false", "present"))

    if violations:
        raise SchemaViolation("AnalyzeRawAudioSignalResult", violations)


def dump(model: BaseModel) -> dict[str, Any]:
    """Serialize a model to its wire form, omitting absent optional fields."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)
