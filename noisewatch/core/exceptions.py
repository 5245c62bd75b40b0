"""Custom exception classes for the application.

This module defines application-specific exceptions that map
to appropriate HTTP status codes and error responses.
"""

from typing import Any, Dict, Optional


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Extra top-level fields for the error body.
        message_key: Key under which the message is rendered.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        message_key: str = "message",
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code to return.
            details: Extra top-level fields for the error body.
            message_key: Key under which the message is rendered.
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.message_key = message_key
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        """Build the JSON error body.

        Returns:
            Dictionary with the message and any extra detail fields.
        """
        return {self.message_key: self.message, **self.details}


class ValidationException(AppException):
    """Raised when caller-supplied data fails a required-field or shape check."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize validation exception.

        Args:
            message: Human-readable error message.
            details: Extra top-level fields for the error body.
        """
        super().__init__(message=message, status_code=400, details=details)


class StorageException(AppException):
    """Raised when the report store fails to persist or query."""

    def __init__(
        self,
        message: str = "Database operation failed",
        details: Optional[Dict[str, Any]] = None,
        message_key: str = "message",
    ) -> None:
        """Initialize storage exception.

        Args:
            message: Human-readable error message.
            details: Extra top-level fields for the error body.
            message_key: Key under which the message is rendered.
        """
        super().__init__(
            message=message,
            status_code=500,
            details=details,
            message_key=message_key,
        )
