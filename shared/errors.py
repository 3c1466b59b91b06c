"""
Shared error handling for the Condition Layout service.
"""

from typing import Dict, Any, Optional, Iterable
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""
    
    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class ConditionLayoutException(Exception):
    """Base exception for condition layout errors."""
    
    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)
    
    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigurationError(ConditionLayoutException):
    """Condition configuration errors."""
    
    def __init__(self, message: str = "Invalid condition configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class UnknownConditionError(ConfigurationError):
    """A condition references a key with no registered handler."""
    
    def __init__(self, key: str, known_keys: Iterable[str] = ()):
        self.key = key
        super().__init__(
            f"Unknown condition key: {key}",
            {"key": key, "known_keys": sorted(known_keys)}
        )
        self.code = "UNKNOWN_CONDITION_KEY"


class ConditionValidationError(ConditionLayoutException):
    """Malformed condition or context payloads."""
    
    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)
