"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.

The notes core never raises for storage corruption, storage write
failures, or invalid session operations; those are recovered locally.
These classes cover programming errors, presentation-facing lookups,
and configuration/input validation.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a note cannot be found."""

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class StorageError(ApplicationError):
    """Raised when the durable store is misused."""

    def __init__(self, message: str = "Storage error", code: str = "STORE_ERROR") -> None:
        super().__init__(message, code=code)


class StorageReadError(StorageError):
    """Raised when a stored blob cannot be read."""

    def __init__(self, message: str = "Storage read failed") -> None:
        super().__init__(message, code="STORE_READ_ERROR")

