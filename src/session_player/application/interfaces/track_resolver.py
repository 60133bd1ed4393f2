"""Port interface for turning user queries into tracks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class TrackResolver(ABC):
    """Search/extraction service; the session layer only consumes its results."""

    @abstractmethod
    async def resolve(self, query: str, requested_by: str = "") -> Track | list[Track]:
        """Resolve a query or URL to a single track or a playlist of tracks."""
        ...
