"""
Unit Tests for Session Events and the EventBus

Tests for:
- Event payloads and names
- Typed and catch-all subscriptions
- Handler failure isolation
"""

import pytest
from pydantic import ValidationError

from session_player.domain.shared.events import (
    CustomError,
    EventBus,
    Finish,
    PlaySong,
    VoteSkipUpdate,
)

SESSION_ID = 111111111111111111


class TestSessionEvents:
    """Unit tests for event models."""

    def test_events_carry_name_and_session(self, sample_track):
        event = PlaySong(session_id=SESSION_ID, track=sample_track)

        assert event.name == "playSong"
        assert event.session_id == SESSION_ID
        assert event.track == sample_track

    def test_event_ids_are_unique(self):
        assert Finish(session_id=SESSION_ID).event_id != Finish(session_id=SESSION_ID).event_id

    def test_events_are_immutable(self):
        event = VoteSkipUpdate(session_id=SESSION_ID, votes=1, members=3)

        with pytest.raises(ValidationError):
            event.votes = 2

    def test_session_id_must_be_positive(self):
        with pytest.raises(ValidationError):
            Finish(session_id=0)


class TestEventBus:
    """Unit tests for EventBus dispatch."""

    async def test_publish_with_no_handlers(self):
        await EventBus().publish(Finish(session_id=SESSION_ID))

    async def test_typed_subscription_only_receives_its_type(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(Finish, handler)
        await bus.publish(Finish(session_id=SESSION_ID))
        await bus.publish(VoteSkipUpdate(session_id=SESSION_ID, votes=1, members=2))

        assert [e.name for e in received] == ["finish"]

    async def test_subscribe_all_receives_everything(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event.name)

        bus.subscribe_all(handler)
        await bus.publish(Finish(session_id=SESSION_ID))
        await bus.publish(
            CustomError(session_id=SESSION_ID, operation="pause", message="x", code="NOT_FOUND")
        )

        assert received == ["finish", "customError"]

    async def test_unsubscribe(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(Finish, handler)
        bus.unsubscribe(Finish, handler)
        await bus.publish(Finish(session_id=SESSION_ID))

        assert received == []

    async def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        received = []

        async def broken(event):
            raise RuntimeError("handler exploded")

        async def healthy(event):
            received.append(event)

        bus.subscribe(Finish, broken)
        bus.subscribe(Finish, healthy)

        await bus.publish(Finish(session_id=SESSION_ID))

        assert len(received) == 1

    async def test_clear(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe_all(handler)
        bus.clear()
        await bus.publish(Finish(session_id=SESSION_ID))

        assert received == []
