"""Example: Analyze one raw audio chunk using the audio tool gateway library."""

import asyncio
import base64
import os

from audio_tool_gateway import GatewayConfig, SchemaViolation, analyze_chunk


async def main():
    """Send a single chunk through the tool-call protocol."""
    # Mock mode unless an API key is available
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    config = GatewayConfig(mock_mode=api_key is None, anthropic_api_key=api_key)

    # 100 ms of 16 kHz mono silence
    pcm = bytes(2 * 1600)
    chunk = {
        "session_id": "example-session",
        "chunk_id": 0,
        "chunk_base64": base64.b64encode(pcm).decode("ascii"),
        "format": "pcm16le",
        "sample_rate_hz": 16000,
        "channels": 1,
        "start_ms": 0,
        "duration_ms": 100,
        "analysis_mode": "hardware_acoustics",
        "final_chunk": True,
    }

    print(f"Analyzing chunk ({'mock' if config.mock_mode else 'live'} mode)...")
    try:
        outcome = await analyze_chunk(chunk, config)
    except SchemaViolation as e:
        for violation in e.violations:
            print(f"  {violation.path}: expected {violation.expected}, got {violation.actual}")
        return

    print(f"\nResult:\n{outcome.tool_result_json}")
    print(f"\nAgent:\n{outcome.final_content}")


if __name__ == "__main__":
    asyncio.run(main())
