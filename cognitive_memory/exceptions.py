"""Exception hierarchy for the cognitive memory store.

Every error raised by the core carries a machine-readable ``error_code``, a
``details`` mapping with the logical entity path and operation involved, and a
``user_message`` suitable for returning to an MCP client. Absolute filesystem
paths never appear in any of these fields.
"""

from __future__ import annotations

from typing import Any


class CognitiveMemoryError(Exception):
    """Base class for all cognitive memory errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.user_message = user_message or message

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for structured logging and tool responses."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }


class ValidationError(CognitiveMemoryError):
    """Caller arguments failed the input pre-check."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        error_details = dict(details or {})
        if field:
            error_details["field"] = field
        if value is not None:
            error_details["invalid_value"] = value
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=error_details,
            user_message=f"Invalid input: {message}",
        )


class PathEscapeError(CognitiveMemoryError):
    """A logical path resolved to a location outside the memory root."""

    def __init__(self, entity_path: str, operation: str | None = None):
        details: dict[str, Any] = {"entity_path": entity_path}
        if operation:
            details["operation"] = operation
        super().__init__(
            message=f"Access denied: path '{entity_path}' escapes memory directory",
            error_code="PATH_ESCAPE",
            details=details,
            user_message=f"Access denied: '{entity_path}' is outside the memory directory",
        )

    @property
    def entity_path(self) -> str:
        return self.details["entity_path"]


class EntityNotFoundError(CognitiveMemoryError):
    """The requested entity does not exist."""

    def __init__(self, entity_path: str, operation: str = "read"):
        super().__init__(
            message=f"Entity '{entity_path}' not found ({operation})",
            error_code="ENTITY_NOT_FOUND",
            details={"entity_path": entity_path, "operation": operation},
            user_message=f"Entity '{entity_path}' does not exist",
        )

    @property
    def entity_path(self) -> str:
        return self.details["entity_path"]


class StorageIOError(CognitiveMemoryError):
    """An underlying read, write, stat or rename failed."""

    def __init__(self, entity_path: str, operation: str, reason: str):
        super().__init__(
            message=f"Storage {operation} failed for '{entity_path}': {reason}",
            error_code="STORAGE_IO_ERROR",
            details={
                "entity_path": entity_path,
                "operation": operation,
                "failure_reason": reason,
            },
            user_message=f"Could not {operation} '{entity_path}': {reason}",
        )

    @property
    def operation(self) -> str:
        return self.details["operation"]


class ConfigurationError(CognitiveMemoryError):
    """Required configuration is missing or invalid."""

    def __init__(self, setting: str, reason: str):
        super().__init__(
            message=f"Invalid configuration for {setting}: {reason}",
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting, "failure_reason": reason},
            user_message=f"Configuration error: {reason}",
        )
