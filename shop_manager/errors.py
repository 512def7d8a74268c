# shop_manager/errors.py
"""
Domain errors shared by the record store, repositories and controllers.

Every class here derives from DomainError so the CLI can surface the message
directly and return to the prompt/exit code without a traceback.
"""

from __future__ import annotations


class DomainError(Exception):
    """Domain-level error the CLI can surface directly."""
    pass


class NotFoundError(DomainError):
    """An id or username did not resolve to a record."""
    pass


class StorageError(DomainError):
    """A data file could not be opened, read or written. Prior state is preserved."""
    pass


class ValidationError(DomainError, ValueError):
    """Malformed or out-of-range input; raised before any file is touched."""
    pass


class PermissionDeniedError(DomainError):
    """The session lacks the capability flag an operation requires."""

    def __init__(self, capability: str, message: str | None = None) -> None:
        self.capability = capability
        super().__init__(message or f"Permission denied: you don't have the '{capability}' capability.")


class AuthenticationError(DomainError):
    """Login failed. The message never says which check rejected it."""

    def __init__(self, message: str = "Invalid username or password, or account is inactive.") -> None:
        super().__init__(message)


__all__ = [
    "DomainError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
    "PermissionDeniedError",
    "AuthenticationError",
]
