"""
Shared error handling for the Pulse news cache.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class PulseError(Exception):
    """Base exception for the news cache layer."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class OfflineNoCacheError(PulseError):
    """Raised when the device is offline and neither cache tier holds the content."""

    def __init__(self, message: str = "Offline and no cached content available", details: Optional[Dict[str, Any]] = None):
        super().__init__("OFFLINE_NO_CACHE", message, details)


class ConfigurationError(PulseError):
    """Configuration-related errors."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)
