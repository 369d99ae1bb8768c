"""Custom exceptions for the audio tool gateway core library."""

from dataclasses import asdict, dataclass
from typing import Any


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class Violation:
    """A single field-level schema failure."""

    path: str
    expected: str
    actual: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class SchemaViolation(GatewayError):
    """Raised when a value does not match one of the closed schemas.

    Carries every failing field, not just the first one.
    """

    def __init__(self, schema: str, violations: list[Violation]):
        self.schema = schema
        self.violations = violations
        paths = ", ".join(v.path or "<root>" for v in violations)
        super().__init__(f"{schema} failed validation at: {paths}")


class ResultContractError(GatewayError):
    """Raised when the analysis produced a result that breaks its contract.

    This is a server-side defect, never a client one.
    """

    def __init__(self, message: str, violations: list[Violation] | None = None):
        self.violations = violations or []
        super().__init__(message)


class ProtocolNonComplianceError(GatewayError):
    """Raised when the external agent does not emit the mandated tool_use block."""

    def __init__(self, message: str, content: Any = None):
        self.content = content
        super().__init__(message)


class ConfigurationError(GatewayError):
    """Raised when there is a configuration problem."""

    pass


class UpstreamError(GatewayError):
    """Base class for errors talking to the external Messages API."""

    def __init__(self, message: str, upstream: str | None = None):
        self.upstream = upstream
        super().__init__(message)


class UpstreamUnreachableError(UpstreamError):
    """Raised when the upstream server is unreachable."""

    pass


class UpstreamTimeoutError(UpstreamError):
    """Raised when a request to the upstream server times out."""

    pass


class UpstreamStatusError(UpstreamError):
    """Raised when the upstream server answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, upstream: str | None = None):
        self.status_code = status_code
        super().__init__(message, upstream=upstream)


class UpstreamInvalidResponseError(UpstreamError):
    """Raised when the upstream server returns a body that is not JSON."""

    pass
