"""Tests for the /analyze endpoint."""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import app
from audio_tool_gateway import UpstreamStatusError, UpstreamUnreachableError, run_audio_analysis, validate_input

client = TestClient(app)


@pytest.fixture
def mock_settings():
    """Settings with mock mode enabled."""
    return Settings(_env_file=None, mock_mode="true")


@pytest.fixture
def live_settings():
    """Settings for the live path with a dummy key."""
    return Settings(_env_file=None, mock_mode="0", anthropic_api_key="test-key")


@pytest.fixture
def messages_client(agent_tool_use, agent_final):
    messages = Mock()
    messages.create_message = AsyncMock(side_effect=[agent_tool_use, agent_final])
    return messages


# --- Mock path ---


@patch("app.main.get_settings")
def test_analyze_mock_example_chunk(mock_get_settings, mock_settings, chunk):
    """Mock mode returns the synthetic envelope and a validated result."""
    mock_get_settings.return_value = mock_settings

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"mock", "tool_use", "tool_result_json", "claude_final"}
    assert data["mock"] is True
    assert data["tool_use"]["id"].startswith("mock_toolu_")
    assert data["tool_use"]["input"] == chunk

    result = data["tool_result_json"]
    assert result["session_id"] == "s1"
    assert result["chunk_id"] == 0
    assert result["quality"]["is_silence"] is False
    assert result["anomaly_detection"]["severity"] == "low"
    assert data["claude_final"][0]["type"] == "text"


@patch("app.main.get_settings")
def test_analyze_mock_silent_chunk(mock_get_settings, mock_settings, chunk):
    mock_get_settings.return_value = mock_settings
    chunk["chunk_base64"] = "AAAA"

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 200
    quality = response.json()["tool_result_json"]["quality"]
    assert quality["is_silence"] is True
    assert quality["snr_db"] == 5


@pytest.mark.parametrize("mode", ["emotion_tone", "hardware_acoustics", "anomaly_detection", "code_intent"])
@patch("app.main.get_settings")
def test_analyze_mock_mode_coupling(mock_get_settings, mode, mock_settings, chunk):
    mock_get_settings.return_value = mock_settings
    chunk["analysis_mode"] = mode

    result = client.post("/analyze", json=chunk).json()["tool_result_json"]

    payloads = {"emotion_tone", "hardware_acoustics", "anomaly_detection", "code_intent"} & set(result)
    assert payloads == {mode}


@patch("app.main.get_settings")
def test_analyze_mock_final_chunk(mock_get_settings, mock_settings, chunk):
    mock_get_settings.return_value = mock_settings
    chunk.update(final_chunk=True, start_ms=1200, duration_ms=300)

    result = client.post("/analyze", json=chunk).json()["tool_result_json"]

    assert result["final_summary"]["window_ms"] == 1500


@patch("app.main.get_settings")
def test_analyze_mock_rejects_three_channels(mock_get_settings, mock_settings, chunk):
    """Invalid input is a 400 with field-level diagnostics."""
    mock_get_settings.return_value = mock_settings
    chunk["channels"] = 3

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 400
    data = response.json()
    assert "failed validation" in data["error"]
    assert data["violations"] == [
        {"path": "input.channels", "expected": data["violations"][0]["expected"], "actual": "3"}
    ]


@patch("app.main.get_settings")
def test_analyze_mock_rejects_unknown_field(mock_get_settings, mock_settings, chunk):
    mock_get_settings.return_value = mock_settings
    chunk["bitrate"] = 128

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 400
    assert [v["path"] for v in response.json()["violations"]] == ["input.bitrate"]


@patch("app.main.get_settings")
def test_analyze_mock_rejects_null_context(mock_get_settings, mock_settings, chunk):
    mock_get_settings.return_value = mock_settings
    chunk["context"] = None

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 400
    assert [v["path"] for v in response.json()["violations"]] == ["input.context"]


@patch("app.main.get_settings")
def test_analyze_invalid_json(mock_get_settings, mock_settings):
    mock_get_settings.return_value = mock_settings

    response = client.post("/analyze", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid JSON in request body")


@patch("app.main.get_settings")
def test_analyze_undecodable_body(mock_get_settings, mock_settings):
    """Bytes that are not valid text are rejected like any other non-JSON body."""
    mock_get_settings.return_value = mock_settings

    response = client.post("/analyze", content=b"\xff\xfe{\x80}", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid JSON in request body")


@patch("app.main.get_settings")
def test_analyze_result_contract_error_is_500(mock_get_settings, mock_settings, chunk):
    """A non-conformant analysis result is a server-side defect."""
    mock_get_settings.return_value = mock_settings
    wrong = run_audio_analysis(validate_input({**chunk, "analysis_mode": "emotion_tone"}))

    with patch("audio_tool_gateway.core.operations.run_audio_analysis", return_value=wrong):
        response = client.post("/analyze", json=chunk)

    assert response.status_code == 500
    assert "non-conformant result" in response.json()["error"]


@patch("app.main.get_settings")
def test_analyze_configuration_failure_is_500(mock_get_settings, chunk):
    mock_get_settings.side_effect = ValueError("Failed to load configuration: ANTHROPIC_API_KEY is required")

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load configuration: ANTHROPIC_API_KEY is required"}


# --- Live path ---


@patch("app.main.get_settings")
@patch("app.main.build_messages_client")
def test_analyze_live_success(mock_build, mock_get_settings, live_settings, messages_client, chunk, agent_final):
    mock_get_settings.return_value = live_settings
    mock_build.return_value = messages_client

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"tool_use", "tool_result_json", "claude_final"}
    assert data["tool_use"]["id"] == "toolu_01"
    assert data["tool_result_json"]["session_id"] == "s1"
    assert data["claude_final"] == agent_final["content"]

    config = mock_build.call_args[0][0]
    assert config.anthropic_api_key == "test-key"
    assert config.mock_mode is False


@patch("app.main.get_settings")
@patch("app.main.build_messages_client")
def test_analyze_live_final_content_passes_through(mock_build, mock_get_settings, live_settings, agent_tool_use, chunk):
    """Null fields inside the agent's content are returned unmodified."""
    final_content = [{"type": "text", "text": "done", "citations": None}]
    messages = Mock()
    messages.create_message = AsyncMock(side_effect=[agent_tool_use, {"content": final_content}])
    mock_get_settings.return_value = live_settings
    mock_build.return_value = messages

    response = client.post("/analyze", json=chunk)

    assert response.json()["claude_final"] == final_content


@patch("app.main.get_settings")
@patch("app.main.build_messages_client")
def test_analyze_live_without_tool_use_is_400(mock_build, mock_get_settings, live_settings, chunk):
    content = [{"type": "text", "text": "Sorry, I can't call that tool."}]
    messages = Mock()
    messages.create_message = AsyncMock(return_value={"content": content})
    mock_get_settings.return_value = live_settings
    mock_build.return_value = messages

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 400
    assert response.json() == {"error": "Claude did not emit tool_use", "content": content}


@patch("app.main.get_settings")
@patch("app.main.build_messages_client")
def test_analyze_live_rejects_bad_input_before_dispatch(
    mock_build, mock_get_settings, live_settings, messages_client, chunk
):
    mock_get_settings.return_value = live_settings
    mock_build.return_value = messages_client
    chunk["channels"] = 3

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 400
    assert [v["path"] for v in response.json()["violations"]] == ["channels"]
    messages_client.create_message.assert_not_awaited()


@pytest.mark.parametrize(
    "error",
    [
        UpstreamUnreachableError("Connection to upstream failed: boom"),
        UpstreamStatusError("Messages API returned HTTP 401: invalid x-api-key", status_code=401),
    ],
)
@patch("app.main.get_settings")
@patch("app.main.build_messages_client")
def test_analyze_live_upstream_errors_are_500(mock_build, mock_get_settings, error, live_settings, chunk):
    messages = Mock()
    messages.create_message = AsyncMock(side_effect=error)
    mock_get_settings.return_value = live_settings
    mock_build.return_value = messages

    response = client.post("/analyze", json=chunk)

    assert response.status_code == 500
    assert response.json() == {"error": error.message}


# --- Tool definition and schemas ---


def test_tool_definition_endpoint():
    response = client.get("/tool-definition")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "analyze_raw_audio_signal"
    assert data["input_schema"]["additionalProperties"] is False


def test_schemas_endpoint():
    response = client.get("/schemas")

    assert response.status_code == 200
    assert "AnalyzeRawAudioSignalToolResultEnvelope" in response.json()
