# src/event_api/exceptions.py

"""
Shared custom exceptions for the Event API service.

Every error carries the HTTP status the Lambda adapter should answer with, so
the adapter can turn any service failure into a response in one place.

Exception Hierarchy:
- EventApiError (base, 500)
  - ValidationError (400)
  - EventNotFoundError (404)
  - StorageError (500)
    - FetchError
    - DeleteError
  - ConfigurationError (500)
"""

from typing import Any, Dict, Optional


class EventApiError(Exception):
    """Base exception for all Event API service errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = dict(context) if context else {}
        self.correlation_id = correlation_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "correlation_id": self.correlation_id,
            "status_code": self.status_code,
        }


class ValidationError(EventApiError):
    """Raised when request input is missing or has the wrong type."""

    status_code = 400

    def __init__(self, message: str, **kwargs):
        if "error_code" not in kwargs:
            kwargs["error_code"] = "VALIDATION_ERROR"
        super().__init__(message, **kwargs)


class EventNotFoundError(EventApiError):
    """Raised when no event is stored under the requested id."""

    status_code = 404

    def __init__(self, event_id: str, **kwargs):
        message = f"Event not found: {event_id}"
        context = {"event_id": event_id}
        super().__init__(message, error_code="EVENT_NOT_FOUND", context=context, **kwargs)
        self.event_id = event_id


# === Storage Errors ===

class StorageError(EventApiError):
    """Raised when the underlying table operation fails."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        context = {}
        if "context" in kwargs:
            context.update(kwargs.pop("context"))
        if operation:
            context["operation"] = operation
        if "error_code" not in kwargs:
            kwargs["error_code"] = "STORAGE_ERROR"
        super().__init__(message, context=context, **kwargs)


class FetchError(StorageError):
    """Raised when an event could not be read from the table."""

    def __init__(self, event_id: str, **kwargs):
        context = {"event_id": event_id}
        if "context" in kwargs:
            context.update(kwargs.pop("context"))
        super().__init__(
            "Couldn't fetch event.",
            operation="GetItem",
            error_code="FETCH_FAILED",
            context=context,
            **kwargs,
        )


class DeleteError(StorageError):
    """Raised when an event could not be deleted from the table."""

    def __init__(self, event_id: str, **kwargs):
        context = {"event_id": event_id}
        if "context" in kwargs:
            context.update(kwargs.pop("context"))
        super().__init__(
            "Couldn't delete event.",
            operation="DeleteItem",
            error_code="DELETE_FAILED",
            context=context,
            **kwargs,
        )


# === Configuration Errors ===

class ConfigurationError(EventApiError):
    """Raised when there's an error in the application configuration."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="CONFIGURATION_ERROR", **kwargs)


# === Utility Functions ===

def get_error_context(error: Exception) -> Dict[str, Any]:
    """Extract error context for logging."""
    if isinstance(error, EventApiError):
        return error.to_dict()
    else:
        return {
            "error_type": error.__class__.__name__,
            "message": str(error),
            "status_code": 500,
        }
