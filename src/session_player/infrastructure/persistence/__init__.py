"""Persistence adapters."""

from session_player.infrastructure.persistence.file_byte_store import FileByteStore
from session_player.infrastructure.persistence.history_log import InMemoryHistoryLog
from session_player.infrastructure.persistence.sqlite_history_log import SQLiteHistoryLog

__all__ = [
    "FileByteStore",
    "InMemoryHistoryLog",
    "SQLiteHistoryLog",
]
