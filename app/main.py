"""FastAPI application entry point for the Audio Tool Gateway."""

import json
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import get_settings
from app.schemas import AnalyzeResponse, ErrorResponse, ToolDefinitionResponse
from app.security import MaxBodySizeMiddleware, RequestIDMiddleware
from audio_tool_gateway.core.client import build_messages_client
from audio_tool_gateway.core.exceptions import ProtocolNonComplianceError, SchemaViolation
from audio_tool_gateway.core.logging import setup_logging
from audio_tool_gateway.core.operations import analyze_chunk
from audio_tool_gateway.core.tool_definition import build_tool_definition, json_schemas

logger = logging.getLogger(__name__)


def _load_settings_safe():
    """Load settings, returning None when config is unavailable (e.g. tests)."""
    try:
        return get_settings()
    except ValueError:
        return None


def create_app() -> FastAPI:
    """Build and return the FastAPI application with all middleware configured."""
    settings = _load_settings_safe()

    if settings is not None:
        setup_logging(settings.log_level)

    application = FastAPI(
        title="Audio Tool Gateway",
        description="Closed-schema tool-call gateway for raw audio chunk analysis",
        version=__version__,
    )

    # Middleware stack (order matters: outermost is listed first, executes first)
    # 1. Request ID — assigned before anything else
    application.add_middleware(RequestIDMiddleware)

    # 2. Body size guard for /analyze
    application.add_middleware(
        MaxBodySizeMiddleware,
        max_bytes=settings.max_body_bytes if settings else 10_000_000,
    )

    # 3. CORS — configured from environment
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins_list if settings else [],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    return application


app = create_app()


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    """Build an error body shaped like ErrorResponse; agent content passes through untouched."""
    body = {"error": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=body)


@app.get("/health")
async def health():
    """Health check endpoint."""
    settings = _load_settings_safe()
    return {
        "ok": True,
        "version": __version__,
        "mock_mode": settings.mock_mode_bool if settings else None,
    }


@app.get("/tool-definition")
async def tool_definition() -> ToolDefinitionResponse:
    """Tool registration document for the analyze_raw_audio_signal tool."""
    return ToolDefinitionResponse(**build_tool_definition())


@app.get("/schemas")
async def schemas() -> dict:
    """JSON Schemas of the input, result, tool_use and tool_result contracts."""
    return json_schemas()


@app.post(
    "/analyze",
    responses={
        200: {"model": AnalyzeResponse},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def analyze(request: Request) -> JSONResponse:
    """
    Analyze one raw audio chunk through the tool-call protocol.

    In mock mode the tool_use block is synthesised locally; otherwise the
    external agent is asked to emit it, the result is sent back, and its final
    content is returned alongside the validated artifacts.
    """
    try:
        settings = get_settings()

        body_bytes = await request.body()
        try:
            tool_input = json.loads(body_bytes)
        except ValueError as e:
            return _error(400, f"Invalid JSON in request body: {str(e)}")

        config = settings.to_gateway_config()
        client = None if config.mock_mode else build_messages_client(config)

        outcome = await analyze_chunk(tool_input, config, client)
        return JSONResponse(content=outcome.to_response())

    except SchemaViolation as e:
        logger.info("Rejected %s: %s", e.schema, e.message)
        return _error(400, e.message, violations=[v.to_dict() for v in e.violations])
    except ProtocolNonComplianceError as e:
        return _error(400, e.message, content=e.content)
    except Exception as e:
        logger.exception(f"Unexpected error in analyze: {e}")
        return _error(500, str(e) or "Unknown error")


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
