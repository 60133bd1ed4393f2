"""Port interface for opaque location-addressed byte storage."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ByteStore(ABC):
    """Reads and writes whole payloads by location string (e.g. a path).

    Implementations raise ``PersistenceIOError`` (or ``OSError``) on failure.
    """

    @abstractmethod
    async def write(self, location: str, data: bytes) -> None:
        ...

    @abstractmethod
    async def read(self, location: str) -> bytes:
        ...
