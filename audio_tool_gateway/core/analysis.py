"""Stub audio analysis.

Returns fixed, illustrative values. A real deployment swaps in DSP/ML
inference but must keep the contract: same input consumed, same result schema,
exactly the payload for the requested mode, and a final summary only on the
final chunk.
"""

import time

from audio_tool_gateway.core.schemas import (
    AnalyzeRawAudioSignalInput,
    AnalyzeRawAudioSignalResult,
    AnomalyDetection,
    CodeIntent,
    EmotionTone,
    FinalSummary,
    HardwareAcoustics,
    Quality,
)

# Payloads shorter than this are treated as silence.
SILENCE_BASE64_THRESHOLD = 24

STUB_LATENCY_MS = 25


def _emotion_tone() -> EmotionTone:
    return EmotionTone(
        valence=0.1,
        arousal=0.6,
        stress_prob=0.7,
        anger_prob=0.2,
        frustration_prob=0.4,
    )


def _hardware_acoustics() -> HardwareAcoustics:
    return HardwareAcoustics(
        dominant_freq_hz=280.5,
        spectral_centroid_hz=1100.2,
        fan_fault_prob=0.25,
        bearing_wear_prob=0.18,
        recommended_action="No immediate action required.",
    )


def _anomaly_detection() -> AnomalyDetection:
    return AnomalyDetection(
        anomaly_score=0.22,
        event_label="normal_operation",
        severity="low",
    )


def _code_intent() -> CodeIntent:
    return CodeIntent(
        action="debug",
        target_file="app/main.py",
        intent_summary="Add cleanup for session-scoped audio buffers to prevent leaks.",
        proposed_changes=[
            "Track buffers in a dict keyed by session_id.",
            "Clear and delete session buffer when final_chunk is true.",
            "Add timeout-based cleanup for abandoned sessions.",
        ],
        impact_analysis="Reduces memory growth over long-lived sessions with low behavioral risk.",
    )


_MODE_PAYLOADS = {
    "emotion_tone": _emotion_tone,
    "hardware_acoustics": _hardware_acoustics,
    "anomaly_detection": _anomaly_detection,
    "code_intent": _code_intent,
}


def run_audio_analysis(
    tool_input: AnalyzeRawAudioSignalInput,
    received_at_ms: int | None = None,
) -> AnalyzeRawAudioSignalResult:
    """Analyze one validated chunk.

    Args:
        tool_input: The validated chunk descriptor.
        received_at_ms: Receipt timestamp; defaults to the current epoch ms.

    Returns:
        The analysis result for the chunk.
    """
    if received_at_ms is None:
        received_at_ms = int(time.time() * 1000)

    is_silence = len(tool_input.chunk_base64) < SILENCE_BASE64_THRESHOLD

    payload = {tool_input.analysis_mode: _MODE_PAYLOADS[tool_input.analysis_mode]()}

    if tool_input.final_chunk:
        payload["final_summary"] = FinalSummary(
            window_ms=tool_input.start_ms + tool_input.duration_ms,
            overall_risk="low",
            key_findings=["No critical anomalies detected."],
        )

    return AnalyzeRawAudioSignalResult(
        session_id=tool_input.session_id,
        chunk_id=tool_input.chunk_id,
        received_at_ms=received_at_ms,
        latency_ms=STUB_LATENCY_MS,
        quality=Quality(
            snr_db=5.0 if is_silence else 22.0,
            clipping_ratio=0.01,
            is_silence=is_silence,
        ),
        **payload,
    )
