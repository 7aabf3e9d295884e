"""
Shared error handling for the rating prompt service.
"""

from typing import Dict, Any, Optional


class RatingPromptException(Exception):
    """Base exception for rating prompt components."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a loggable mapping."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class StoreError(RatingPromptException):
    """Persistent store read/write errors."""

    def __init__(self, message: str = "Store operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_ERROR", message, details)


class ConfigurationError(RatingPromptException):
    """Invalid service configuration."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)
