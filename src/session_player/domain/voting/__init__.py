"""
Voting Bounded Context

Domain logic for majority skip voting.
"""

from session_player.domain.voting.entities import VoteSkipOutcome, VoteSkipState
from session_player.domain.voting.services import VoteSkipCoordinator

__all__ = [
    "VoteSkipState",
    "VoteSkipOutcome",
    "VoteSkipCoordinator",
]
