"""Filesystem-backed byte store."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from session_player.application.interfaces.byte_store import ByteStore
from session_player.domain.shared.exceptions import PersistenceIOError

logger = logging.getLogger(__name__)


class FileByteStore(ByteStore):
    """Treats locations as file paths, relative ones resolved against ``base_dir``."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else None

    def resolve(self, location: str) -> Path:
        path = Path(location)
        if self._base_dir is not None and not path.is_absolute():
            path = self._base_dir / path
        return path

    async def write(self, location: str, data: bytes) -> None:
        path = self.resolve(location)
        try:
            await asyncio.to_thread(self._write_file, path, data)
        except OSError as e:
            raise PersistenceIOError(location, message=f"Cannot write '{path}': {e}") from e
        logger.debug("Wrote %d bytes to %s", len(data), path)

    async def read(self, location: str) -> bytes:
        path = self.resolve(location)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise PersistenceIOError(location, message=f"Cannot read '{path}': {e}") from e

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
