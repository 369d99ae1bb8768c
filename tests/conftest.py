"""Shared pytest fixtures."""

import pytest


@pytest.fixture
def chunk():
    """A well-formed, non-silent anomaly_detection chunk descriptor."""
    return {
        "session_id": "s1",
        "chunk_id": 0,
        "chunk_base64": "AAAAAAAAAAAAAAAAAAAAAAAA",
        "format": "pcm16le",
        "sample_rate_hz": 16000,
        "channels": 1,
        "start_ms": 0,
        "duration_ms": 100,
        "analysis_mode": "anomaly_detection",
        "final_chunk": False,
    }


@pytest.fixture
def agent_tool_use(chunk):
    """First Messages API response: the agent calls the tool with ``chunk``."""
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "content": [
            {
                "type": "tool_use",
                "id": "toolu_01",
                "name": "analyze_raw_audio_signal",
                "input": chunk,
            }
        ],
        "stop_reason": "tool_use",
    }


@pytest.fixture
def agent_final():
    """Second Messages API response: the agent summarises the tool result."""
    return {
        "id": "msg_02",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": "Normal operation, low severity."}],
        "stop_reason": "end_turn",
    }
