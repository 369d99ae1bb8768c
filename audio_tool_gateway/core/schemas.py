"""Closed schemas for the analyze_raw_audio_signal tool contract.

Every model forbids unknown keys, and scalar fields are validated strictly so
that ``"3"`` never passes as ``3`` and ``1`` never passes as ``True``. Integer
fields accept whole-number floats such as ``0.0``, which JSON does not tell
apart from ``0``. Bounds are inclusive.

Optional fields may be omitted but never sent as ``null``: they are declared
with their real type and an unvalidated ``None`` default.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

TOOL_NAME = "analyze_raw_audio_signal"

AudioFormat = Literal["pcm16le", "float32le", "wav"]
AnalysisMode = Literal["emotion_tone", "hardware_acoustics", "anomaly_detection", "code_intent"]
Severity = Literal["low", "medium", "high", "critical"]
OverallRisk = Literal["low", "medium", "high", "critical"]
CodeAction = Literal["refactor", "create_feature", "debug", "document"]

# Modes map one-to-one onto the optional payload fields of the result.
MODE_PAYLOAD_FIELDS: tuple[str, ...] = (
    "emotion_tone",
    "hardware_acoustics",
    "anomaly_detection",
    "code_intent",
)


def _whole_number(value):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


Integer = Annotated[StrictInt, BeforeValidator(_whole_number)]
Probability = Annotated[StrictFloat, Field(ge=0.0, le=1.0)]
NonNegativeInt = Annotated[Integer, Field(ge=0)]


class ClosedModel(BaseModel):
    """Base for every schema: unknown fields are a validation failure."""

    model_config = ConfigDict(extra="forbid")


class AnalyzeRawAudioSignalInput(ClosedModel):
    """One raw audio chunk descriptor, as passed to the tool."""

    session_id: StrictStr = Field(min_length=1, description="Stable identifier of the audio session")
    chunk_id: NonNegativeInt = Field(description="Index of this chunk within the session")
    chunk_base64: StrictStr = Field(min_length=1, description="Base64-encoded audio payload")
    format: AudioFormat = Field(description="Encoding of the audio payload")
    sample_rate_hz: Integer = Field(ge=8000, le=96000, description="Sample rate in Hz")
    channels: Integer = Field(ge=1, le=2, description="Number of interleaved channels")
    start_ms: NonNegativeInt = Field(description="Offset of the chunk from session start (ms)")
    duration_ms: Integer = Field(ge=10, le=5000, description="Chunk duration (ms)")
    analysis_mode: AnalysisMode = Field(description="Which analysis to run on the chunk")
    context: StrictStr = Field(default=None, description="Optional free-text context")
    final_chunk: StrictBool = Field(default=False, description="True for the last chunk of the session")


class ToolUseEnvelope(ClosedModel):
    """A tool invocation request emitted by the external agent."""

    type: Literal["tool_use"]
    id: StrictStr = Field(min_length=1)
    name: Literal["analyze_raw_audio_signal"]
    input: AnalyzeRawAudioSignalInput


class Quality(ClosedModel):
    snr_db: StrictFloat
    clipping_ratio: Probability
    is_silence: StrictBool


class EmotionTone(ClosedModel):
    valence: Annotated[StrictFloat, Field(ge=-1.0, le=1.0)]
    arousal: Probability
    stress_prob: Probability
    anger_prob: Probability
    frustration_prob: Probability


class HardwareAcoustics(ClosedModel):
    dominant_freq_hz: StrictFloat
    spectral_centroid_hz: StrictFloat
    fan_fault_prob: Probability
    bearing_wear_prob: Probability
    recommended_action: StrictStr


class AnomalyDetection(ClosedModel):
    anomaly_score: Probability
    event_label: StrictStr
    severity: Severity


class CodeIntent(ClosedModel):
    action: CodeAction
    target_file: StrictStr
    intent_summary: StrictStr
    proposed_changes: list[StrictStr]
    impact_analysis: StrictStr


class Alert(ClosedModel):
    code: StrictStr
    message: StrictStr
    threshold: StrictFloat = None
    observed: StrictFloat = None


class FinalSummary(ClosedModel):
    window_ms: Integer
    overall_risk: OverallRisk
    key_findings: list[StrictStr]


class AnalyzeRawAudioSignalResult(ClosedModel):
    """Structured analysis of one chunk.

    At most one of the mode-specific payloads is expected, matching the
    requested ``analysis_mode``. The schema alone allows any combination; the
    coupling is checked by ``validators.check_mode_payload``.
    """

    session_id: StrictStr
    chunk_id: Integer
    received_at_ms: NonNegativeInt
    latency_ms: NonNegativeInt
    quality: Quality
    emotion_tone: EmotionTone = None
    hardware_acoustics: HardwareAcoustics = None
    anomaly_detection: AnomalyDetection = None
    code_intent: CodeIntent = None
    alerts: list[Alert] = None
    final_summary: FinalSummary = None


class ToolResultContentItem(ClosedModel):
    """A json-tagged content item; ``json`` on the wire."""

    type: Literal["json"]
    json_: AnalyzeRawAudioSignalResult = Field(alias="json")


class ToolResultEnvelope(ClosedModel):
    """The tool result sent back to the external agent."""

    type: Literal["tool_result"]
    tool_use_id: StrictStr = Field(min_length=1)
    content: list[ToolResultContentItem] = Field(min_length=1)
