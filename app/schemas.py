"""Response schemas for the HTTP surface."""

from typing import Any

from pydantic import BaseModel, Field


class ViolationDetail(BaseModel):
    """One failing field of a schema violation."""

    path: str = Field(description="Dotted path of the failing field ('' for the root)")
    expected: str = Field(description="What the schema required")
    actual: str = Field(description="What was received")


class ErrorResponse(BaseModel):
    """Error body returned by /analyze."""

    error: str = Field(description="Human-readable error message")
    content: list[Any] | None = Field(default=None, description="Raw agent content, for protocol failures")
    violations: list[ViolationDetail] | None = Field(default=None, description="Field-level schema diagnostics")


class AnalyzeResponse(BaseModel):
    """Success body returned by /analyze."""

    mock: bool | None = Field(default=None, description="Present and true when the agent was simulated")
    tool_use: dict[str, Any] = Field(description="Validated tool_use envelope")
    tool_result_json: dict[str, Any] = Field(description="Validated analysis result")
    claude_final: list[Any] = Field(description="Final content from the agent")


class ToolDefinitionResponse(BaseModel):
    """Tool registration document for external tool-calling APIs."""

    name: str
    description: str
    input_schema: dict[str, Any]
