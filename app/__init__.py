"""HTTP service exposing the audio tool gateway."""

from audio_tool_gateway import __version__

__all__ = ["__version__"]
