"""Core domain entities for the voting bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from session_player.domain.shared.datetime_utils import utcnow
from session_player.domain.shared.types import NonNegativeInt, SessionIdInt, UtcDatetimeField


class VoteSkipOutcome(BaseModel):
    """Result of a single skip vote."""

    model_config = ConfigDict(frozen=True, strict=True)

    success: bool
    votes: NonNegativeInt
    members: NonNegativeInt


class VoteSkipState(BaseModel):
    """Distinct voters collected for one session since the last resolution."""

    session_id: SessionIdInt
    started_at: UtcDatetimeField = Field(default_factory=utcnow)
    _voters: set[int] = PrivateAttr(default_factory=set)

    @property
    def vote_count(self) -> int:
        return len(self._voters)

    @property
    def voters(self) -> frozenset[int]:
        return frozenset(self._voters)

    def add_vote(self, voter_id: int) -> bool:
        """Add a vote. Returns False when the voter was already counted."""
        if voter_id in self._voters:
            return False
        self._voters.add(voter_id)
        return True

    def has_voted(self, voter_id: int) -> bool:
        return voter_id in self._voters

    def reset(self) -> None:
        self._voters.clear()
        self.started_at = utcnow()
