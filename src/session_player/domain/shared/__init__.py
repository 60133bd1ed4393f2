"""
Shared Domain Kernel

Contains types, messages and exceptions shared across all bounded contexts.
"""

from session_player.domain.shared.exceptions import (
    ConflictError,
    DomainError,
    InvalidArgumentError,
    NotFoundError,
    PersistenceIOError,
)

__all__ = [
    "DomainError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "PersistenceIOError",
]
