"""
Shared error handling for the Nhost Python client.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel
from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error payload format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class NhostException(Exception):
    """Base exception for the Nhost client."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error payload."""
        # Get trace ID from current span
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigurationError(NhostException):
    """Missing, ambiguous or invalid client configuration."""

    def __init__(self, message: str = "Invalid client configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class ServiceConstructionError(NhostException):
    """A service client could not be constructed."""

    def __init__(self, service: str, message: str = "Service construction failed", details: Optional[Dict[str, Any]] = None):
        self.service = service
        super().__init__("SERVICE_CONSTRUCTION_ERROR", f"{service}: {message}", details)


class ApiException(NhostException):
    """Non-successful response returned by an Nhost service."""

    def __init__(self, url: str, status_code: int, body: Any = None, details: Optional[Dict[str, Any]] = None):
        self.url = url
        self.status_code = status_code
        self.body = body
        merged = {"url": url, "status_code": status_code}
        merged.update(details or {})
        super().__init__("API_ERROR", f"{url} responded with {status_code}", merged)


class ClientClosedError(NhostException):
    """A closed client was asked for a service or its transport."""

    def __init__(self, message: str = "Nhost client is closed", details: Optional[Dict[str, Any]] = None):
        super().__init__("CLIENT_CLOSED", message, details)
