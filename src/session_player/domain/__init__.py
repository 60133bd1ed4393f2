"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, messages, exceptions and events
- music/: Tracks, the playback session aggregate, snapshots and history
- filters/: The audio filter chain
- voting/: Majority skip voting
"""

from session_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
