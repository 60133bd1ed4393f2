"""Session events and the event sink they are published to."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, Literal, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..music.entities import Track
from ..music.snapshot import Snapshot
from .datetime_utils import utcnow
from .messages import LogTemplates
from .types import NonEmptyStr, NonNegativeInt, SessionIdInt, UtcDatetimeField

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="SessionEvent")
EventHandler = Callable[[T], Awaitable[None]]


class SessionEvent(BaseModel):
    """Base class for everything published to the event sink."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)
    session_id: SessionIdInt


class PlaySong(SessionEvent):
    name: Literal["playSong"] = "playSong"
    track: Track


class AddSong(SessionEvent):
    name: Literal["addSong"] = "addSong"
    track: Track
    position: NonNegativeInt


class AddList(SessionEvent):
    name: Literal["addList"] = "addList"
    tracks: list[Track]


class Finish(SessionEvent):
    name: Literal["finish"] = "finish"


class Empty(SessionEvent):
    name: Literal["empty"] = "empty"


class Disconnect(SessionEvent):
    name: Literal["disconnect"] = "disconnect"


class PlaybackError(SessionEvent):
    """Failure reported by the voice transport while playing."""

    name: Literal["error"] = "error"
    message: str
    error_type: str = ""


class VoteSkipUpdate(SessionEvent):
    name: Literal["voteSkipUpdate"] = "voteSkipUpdate"
    votes: NonNegativeInt
    members: NonNegativeInt


class VoteSkipSuccess(SessionEvent):
    name: Literal["voteSkipSuccess"] = "voteSkipSuccess"
    votes: NonNegativeInt
    members: NonNegativeInt


class QueueLoaded(SessionEvent):
    name: Literal["queueLoaded"] = "queueLoaded"
    location: str
    snapshot: Snapshot


class CustomError(SessionEvent):
    """A command was rejected; the same error is also raised to the caller."""

    name: Literal["customError"] = "customError"
    operation: str
    message: str
    code: str


class EventSink(ABC):
    """Fan-out channel the session layer publishes state transitions to."""

    @abstractmethod
    async def publish(self, event: SessionEvent) -> None:
        ...


class EventBus(EventSink):
    """In-memory pub/sub event sink.

    Handlers are called concurrently. Exceptions in handlers are logged
    but do not prevent other handlers from running.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[SessionEvent], list[EventHandler[Any]]] = defaultdict(list)
        self._catch_all: list[EventHandler[SessionEvent]] = []

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("Subscribed handler to: %s", event_type.__name__)

    def subscribe_all(self, handler: EventHandler[SessionEvent]) -> None:
        """Receive every published event regardless of its type."""
        self._catch_all.append(handler)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Unsubscribed handler from %s", event_type.__name__)

    async def publish(self, event: SessionEvent) -> None:
        event_type = type(event)
        handlers = [*self._handlers.get(event_type, []), *self._catch_all]

        if not handlers:
            logger.debug("No handlers for %s", event_type.__name__)
            return

        logger.debug("Publishing %s to %d handlers", event_type.__name__, len(handlers))

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logger.exception(LogTemplates.EVENT_HANDLER_FAILED, event_type.__name__, e)

        async with asyncio.TaskGroup() as tg:
            for handler in handlers:
                tg.create_task(safe_call(handler))

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        self._catch_all.clear()
        logger.debug("Cleared all event handlers")
