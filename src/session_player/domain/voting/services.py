"""
Voting Domain Services

Consensus rules for skip votes.
"""

from __future__ import annotations

import math

from session_player.domain.shared.exceptions import InvalidArgumentError
from session_player.domain.shared.messages import ErrorMessages
from session_player.domain.voting.entities import VoteSkipOutcome, VoteSkipState


class VoteSkipCoordinator:
    """Tracks skip votes per session and decides when a majority is reached.

    A session moves from idle to voting on its first vote. Once the distinct
    voter count reaches ``ceil(members / 2)`` the vote resolves, the voter set
    is dropped and the caller is expected to skip. With zero eligible members
    the threshold is zero, so any single vote resolves immediately.

    The coordinator holds no lock of its own; callers serialize access per
    session. Member counts are taken as arguments on every call and never
    stored.
    """

    def __init__(self) -> None:
        self._states: dict[int, VoteSkipState] = {}

    @staticmethod
    def threshold(eligible_members: int) -> int:
        """Votes needed for a majority of the currently present members."""
        return math.ceil(eligible_members / 2)

    def vote(self, session_id: int, voter_id: int, eligible_members: int) -> VoteSkipOutcome:
        """Record a vote and report whether the skip passes.

        Args:
            session_id: The session being voted on.
            voter_id: The member casting the vote; repeat votes are not counted twice.
            eligible_members: Non-bot members present right now.

        Returns:
            The outcome with the tally before any reset.
        """
        if (
            isinstance(eligible_members, bool)
            or not isinstance(eligible_members, int)
            or eligible_members < 0
        ):
            raise InvalidArgumentError(ErrorMessages.INVALID_MEMBER_COUNT, field="members")

        state = self._states.get(session_id)
        if state is None:
            state = VoteSkipState(session_id=session_id)
            self._states[session_id] = state

        state.add_vote(voter_id)
        votes = state.vote_count

        if votes >= self.threshold(eligible_members):
            del self._states[session_id]
            return VoteSkipOutcome(success=True, votes=votes, members=eligible_members)

        return VoteSkipOutcome(success=False, votes=votes, members=eligible_members)

    def votes(self, session_id: int) -> int:
        state = self._states.get(session_id)
        return state.vote_count if state else 0

    def is_voting(self, session_id: int) -> bool:
        return session_id in self._states

    def reset(self, session_id: int) -> bool:
        """Drop any pending votes for a session. Returns True if there were any."""
        return self._states.pop(session_id, None) is not None
