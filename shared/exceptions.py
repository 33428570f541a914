"""Custom exceptions for the diagnostic query generator."""
from typing import List, Optional


class DiagnosticQueryException(Exception):
    """Base exception for the diagnostic query generator."""
    pass


class QueryGenerationError(DiagnosticQueryException):
    """Remote query generation failed."""

    cause = "generation_error"


class QueryTimeoutError(QueryGenerationError):
    """Remote generation exceeded the resolved timeout."""

    cause = "timeout"

    def __init__(self, message: str, timeout_ms: Optional[int] = None):
        super().__init__(message)
        self.timeout_ms = timeout_ms


class TransportError(QueryGenerationError):
    """Network or HTTP level failure talking to the generation service."""

    cause = "transport"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(QueryGenerationError):
    """Generated SQL failed the safety scan."""

    cause = "validation"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class MalformedResponseError(QueryGenerationError):
    """Generation service response was missing required fields."""

    cause = "malformed_response"
