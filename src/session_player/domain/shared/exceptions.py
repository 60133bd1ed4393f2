"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidArgumentError(DomainError):
    """Raised when an argument is out of range or unrecognized."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="INVALID_ARGUMENT")
        self.field = field


class NotFoundError(DomainError):
    """Raised when a session, queue or filter does not exist."""

    def __init__(self, entity_type: str, identifier: str | int, message: str | None = None) -> None:
        msg = message or f"{entity_type} with id '{identifier}' not found"
        super().__init__(msg, code="NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class ConflictError(DomainError):
    """Raised when a strict insert collides with an existing entry."""

    def __init__(self, entity_type: str, identifier: str, message: str | None = None) -> None:
        msg = message or f"{entity_type} '{identifier}' already exists"
        super().__init__(msg, code="CONFLICT")
        self.entity_type = entity_type
        self.identifier = identifier


class PersistenceIOError(DomainError):
    """Raised by persistence adapters when the byte store cannot be read or written.

    QueuePersistence converts this into a boolean / ``None`` result instead of
    propagating it.
    """

    def __init__(self, location: str, message: str | None = None) -> None:
        msg = message or f"I/O failure at '{location}'"
        super().__init__(msg, code="IO_ERROR")
        self.location = location
