"""Playback Application Service - serialized session commands with events and history."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import TypeAdapter

from ...domain.filters.value_objects import EqualizerPreset, FilterSpec
from ...domain.music.entities import DEFAULT_VOLUME_STEP, PlaybackSession, QueueInfo, Track
from ...domain.music.snapshot import Snapshot, TrackView
from ...domain.music.value_objects import RepeatMode, SessionDestroyReason
from ...domain.shared.events import (
    AddList,
    AddSong,
    CustomError,
    Disconnect,
    Empty,
    Finish,
    PlaybackError,
    PlaySong,
    QueueLoaded,
    SessionEvent,
    VoteSkipSuccess,
    VoteSkipUpdate,
)
from ...domain.shared.exceptions import DomainError, InvalidArgumentError, NotFoundError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.voting.entities import VoteSkipOutcome

if TYPE_CHECKING:
    from ...domain.music.repository import HistoryEntry, HistoryLog
    from ...domain.shared.events import EventSink
    from ...domain.voting.services import VoteSkipCoordinator
    from ..interfaces.track_resolver import TrackResolver
    from ..interfaces.voice_transport import VoiceTransport
    from .queue_persistence import QueuePersistence
    from .session_registry import SessionRegistry

logger = logging.getLogger(__name__)

R = TypeVar("R")
Action = Callable[[PlaybackSession, list[SessionEvent]], R]

_TRACK_VIEWS = TypeAdapter(list[TrackView])


class PlaybackApplicationService:
    """Runs every session command inside the session's critical section.

    Each command:
      - locates the session (or creates it, for enqueue-like commands),
      - applies the domain mutation,
      - queues a ``playSong`` event when the track now playing changed, or a
        ``finish`` event when the queue ran dry,
      - once the lock is released, appends the history entry and publishes the
        queued events.

    A failed history write is logged and published as ``error``; the command
    itself still succeeds.

    Domain errors are logged, published as ``customError`` and re-raised.
    """

    def __init__(
        self,
        *,
        session_registry: SessionRegistry,
        vote_coordinator: VoteSkipCoordinator,
        event_sink: EventSink,
        history_log: HistoryLog,
        queue_persistence: QueuePersistence,
        voice_transport: VoiceTransport | None = None,
        track_resolver: TrackResolver | None = None,
        leave_on_empty: bool = True,
        leave_on_stop: bool = False,
        volume_step: int = DEFAULT_VOLUME_STEP,
        progress_bar_length: int = 20,
    ) -> None:
        self._registry = session_registry
        self._votes = vote_coordinator
        self._events = event_sink
        self._history = history_log
        self._persistence = queue_persistence
        self._voice = voice_transport
        self._resolver = track_resolver
        self._leave_on_empty = leave_on_empty
        self._leave_on_stop = leave_on_stop
        self._volume_step = volume_step
        self._progress_bar_length = progress_bar_length
        self._history_lock = asyncio.Lock()

    # =========================================================================
    # Plumbing
    # =========================================================================

    async def _run(
        self,
        session_id: int,
        operation: str,
        action: Action[R],
        *,
        create: bool = False,
    ) -> R:
        events: list[SessionEvent] = []
        try:
            async with self._registry.lock(session_id, create=create):
                if create:
                    session = self._registry.get_or_create(session_id)
                else:
                    session = self._registry.get(session_id)
                before = session.track_changes
                had_tracks = session.has_tracks

                result = action(session, events)

                started = self._record_transition(session, before, had_tracks, events)
        except DomainError as e:
            await self._forward_error(session_id, operation, e)
            raise

        history_error = None
        if started is not None:
            history_error = await self._append_history(session_id, started)
        await self._publish(events)
        if history_error is not None:
            await self.report_error(session_id, history_error)
        return result

    def _record_transition(
        self,
        session: PlaybackSession,
        before: int,
        had_tracks: bool,
        events: list[SessionEvent],
    ) -> Track | None:
        """Queue the transition event; returns the track that started playing, if any."""
        track = session.now_playing
        if track is not None and session.track_changes != before:
            events.append(PlaySong(session_id=session.session_id, track=track))
            logger.info(LogTemplates.PLAYBACK_STARTED, track.title, session.session_id)
            return track
        if had_tracks and track is None:
            events.append(Finish(session_id=session.session_id))
            logger.info(LogTemplates.PLAYBACK_FINISHED, session.session_id)
        return None

    async def _append_history(self, session_id: int, track: Track) -> Exception | None:
        # Runs after the session lock is released; writes keep transition order
        try:
            async with self._history_lock:
                await self._history.append(track, session_id=session_id)
        except Exception as e:
            logger.warning(LogTemplates.HISTORY_APPEND_FAILED, track.title, session_id, e)
            return e
        return None

    async def _forward_error(self, session_id: int, operation: str, error: DomainError) -> None:
        logger.warning(LogTemplates.OPERATION_FAILED, operation, session_id, error.message)
        await self._events.publish(
            CustomError(
                session_id=session_id,
                operation=operation,
                message=error.message,
                code=error.code,
            )
        )

    async def _publish(self, events: list[SessionEvent]) -> None:
        for event in events:
            await self._events.publish(event)

    def _require_voice(self) -> VoiceTransport:
        if self._voice is None:
            raise RuntimeError("Voice transport is not configured")
        return self._voice

    # =========================================================================
    # Queue
    # =========================================================================

    async def play(self, session_id: int, query: str, *, requested_by: str = "") -> list[Track]:
        """Resolve a query and enqueue whatever it yields."""
        if not isinstance(query, str) or not query.strip():
            error = InvalidArgumentError(ErrorMessages.INVALID_QUERY, field="query")
            await self._forward_error(session_id, "play", error)
            raise error
        if self._resolver is None:
            raise RuntimeError("Track resolver is not configured")

        resolved = await self._resolver.resolve(query.strip(), requested_by=requested_by)
        if isinstance(resolved, Track):
            await self.enqueue(session_id, resolved)
            return [resolved]
        await self.enqueue_many(session_id, resolved)
        return list(resolved)

    async def enqueue(self, session_id: int, track: Track) -> int:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> int:
            position = session.enqueue(track)
            events.append(AddSong(session_id=session_id, track=track, position=position))
            logger.info(LogTemplates.QUEUE_ENQUEUED, track.title, position, session_id)
            return position

        return await self._run(session_id, "enqueue", action, create=True)

    async def enqueue_many(self, session_id: int, tracks: list[Track]) -> int:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> int:
            start = session.enqueue_many(tracks)
            if tracks:
                events.append(AddList(session_id=session_id, tracks=list(tracks)))
                logger.info(LogTemplates.QUEUE_ENQUEUED_LIST, len(tracks), session_id)
            return start

        return await self._run(session_id, "enqueue_many", action, create=True)

    async def skip(self, session_id: int) -> Track | None:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> Track | None:
            next_track = session.skip()
            self._votes.reset(session_id)
            logger.info(LogTemplates.PLAYBACK_SKIPPED, session_id)
            return next_track

        return await self._run(session_id, "skip", action)

    async def jump(self, session_id: int, index: int) -> Track | None:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> Track | None:
            next_track = session.jump(index)
            self._votes.reset(session_id)
            logger.info(LogTemplates.QUEUE_JUMPED, index, session_id)
            return next_track

        return await self._run(session_id, "jump", action)

    async def remove(self, session_id: int, index: int) -> Track:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> Track:
            track = session.remove(index)
            logger.info(LogTemplates.QUEUE_REMOVED, track.title, session_id)
            return track

        return await self._run(session_id, "remove", action)

    async def clear_queue(self, session_id: int) -> int:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> int:
            count = session.clear_queue()
            logger.info(LogTemplates.QUEUE_CLEARED, count, session_id)
            return count

        return await self._run(session_id, "clear_queue", action)

    async def shuffle(self, session_id: int) -> None:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> None:
            session.shuffle()
            logger.info(LogTemplates.QUEUE_SHUFFLED, session_id)

        await self._run(session_id, "shuffle", action)

    async def stop(self, session_id: int) -> int:
        """Clear the queue and drop the session; leaves voice when configured to."""

        def action(session: PlaybackSession, events: list[SessionEvent]) -> int:
            count = session.stop()
            self._registry.remove(session_id)
            logger.info(LogTemplates.QUEUE_STOPPED, session_id)
            logger.info(LogTemplates.SESSION_DESTROYED, session_id, SessionDestroyReason.STOP.value)
            return count

        count = await self._run(session_id, "stop", action)
        if self._leave_on_stop and self._voice is not None:
            await self._voice.leave(session_id)
            await self._events.publish(Disconnect(session_id=session_id))
        return count

    # =========================================================================
    # Transport
    # =========================================================================

    async def pause(self, session_id: int) -> None:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> None:
            session.pause()
            logger.info(LogTemplates.PLAYBACK_PAUSED, session_id)

        await self._run(session_id, "pause", action)

    async def resume(self, session_id: int) -> None:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> None:
            session.resume()
            logger.info(LogTemplates.PLAYBACK_RESUMED, session_id)

        await self._run(session_id, "resume", action)

    async def toggle_pause(self, session_id: int) -> bool:
        return await self._run(session_id, "toggle_pause", lambda s, _: s.toggle_pause())

    async def set_volume(self, session_id: int, volume: int | float) -> int:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> int:
            result = session.set_volume(volume)
            logger.info(LogTemplates.VOLUME_CHANGED, result, session_id)
            return result

        return await self._run(session_id, "set_volume", action)

    async def increase_volume(self, session_id: int, step: int | float | None = None) -> int:
        amount = self._volume_step if step is None else step
        return await self._run(
            session_id, "increase_volume", lambda s, _: s.increase_volume(amount)
        )

    async def decrease_volume(self, session_id: int, step: int | float | None = None) -> int:
        amount = self._volume_step if step is None else step
        return await self._run(
            session_id, "decrease_volume", lambda s, _: s.decrease_volume(amount)
        )

    async def set_loop(self, session_id: int, mode: str | int | RepeatMode) -> RepeatMode:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> RepeatMode:
            result = session.set_loop(mode)
            logger.info(LogTemplates.LOOP_MODE_CHANGED, result.label, session_id)
            return result

        return await self._run(session_id, "set_loop", action)

    async def seek(self, session_id: int, seconds: int | float) -> None:
        await self._run(session_id, "seek", lambda s, _: s.seek(seconds))

    async def replay(self, session_id: int) -> None:
        await self._run(session_id, "replay", lambda s, _: s.replay())

    async def toggle_autoplay(self, session_id: int) -> bool:
        return await self._run(session_id, "toggle_autoplay", lambda s, _: s.toggle_autoplay())

    # =========================================================================
    # Filters
    # =========================================================================

    def _filter_action(
        self, name: str, apply: Callable[[PlaybackSession], R], template: str
    ) -> Action[R]:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> R:
            session.require_active()
            result = apply(session)
            logger.info(template, name, session.session_id)
            return result

        return action

    async def add_filter(
        self, session_id: int, name: str, params: dict[str, Any] | None = None
    ) -> FilterSpec:
        action = self._filter_action(
            name, lambda s: s.filters.add(name, params), LogTemplates.FILTER_ADDED
        )
        return await self._run(session_id, "add_filter", action)

    async def add_filters(self, session_id: int, names: list[str]) -> list[FilterSpec]:
        """Add several filters at once; blank names are skipped."""

        def action(session: PlaybackSession, events: list[SessionEvent]) -> list[FilterSpec]:
            session.require_active()
            added = session.filters.add_many(names)
            for spec in added:
                logger.info(LogTemplates.FILTER_ADDED, spec.name, session_id)
            return added

        return await self._run(session_id, "add_filters", action)

    async def remove_filter(self, session_id: int, name: str) -> FilterSpec:
        action = self._filter_action(
            name, lambda s: s.filters.remove(name), LogTemplates.FILTER_REMOVED
        )
        return await self._run(session_id, "remove_filter", action)

    async def clear_filters(self, session_id: int) -> int:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> int:
            session.require_active()
            return session.filters.clear()

        return await self._run(session_id, "clear_filters", action)

    async def set_equalizer(
        self, session_id: int, preset: str | EqualizerPreset = EqualizerPreset.BASS
    ) -> FilterSpec:
        action = self._filter_action(
            "equalizer", lambda s: s.filters.set_equalizer(preset), LogTemplates.FILTER_REPLACED
        )
        return await self._run(session_id, "set_equalizer", action)

    async def set_speed(self, session_id: int, speed: float = 1.0) -> FilterSpec:
        action = self._filter_action(
            "speed", lambda s: s.filters.set_speed(speed), LogTemplates.FILTER_REPLACED
        )
        return await self._run(session_id, "set_speed", action)

    async def set_crossfade(self, session_id: int, duration: float = 5) -> FilterSpec:
        action = self._filter_action(
            "crossfade", lambda s: s.filters.set_crossfade(duration), LogTemplates.FILTER_REPLACED
        )
        return await self._run(session_id, "set_crossfade", action)

    async def set_transition(self, session_id: int, duration: float = 3) -> FilterSpec:
        action = self._filter_action(
            "transition",
            lambda s: s.filters.set_transition(duration),
            LogTemplates.FILTER_REPLACED,
        )
        return await self._run(session_id, "set_transition", action)

    async def normalize_loudness(self, session_id: int) -> FilterSpec:
        action = self._filter_action(
            "loudnorm", lambda s: s.filters.normalize_loudness(), LogTemplates.FILTER_REPLACED
        )
        return await self._run(session_id, "normalize_loudness", action)

    def filters(self, session_id: int) -> list[str]:
        session = self._registry.find(session_id)
        return session.filters.names() if session else []

    # =========================================================================
    # Voting
    # =========================================================================

    async def vote_skip(self, session_id: int, voter_id: int) -> VoteSkipOutcome:
        """Count a skip vote against the members present right now."""
        voice = self._require_voice()

        def action(session: PlaybackSession, events: list[SessionEvent]) -> VoteSkipOutcome:
            session.require_active()
            members = voice.current_non_bot_member_count(session_id)
            outcome = self._votes.vote(session_id, voter_id, members)
            logger.info(
                LogTemplates.VOTE_RECORDED,
                session_id,
                outcome.votes,
                self._votes.threshold(members),
                members,
            )

            if outcome.success:
                events.append(
                    VoteSkipSuccess(session_id=session_id, votes=outcome.votes, members=members)
                )
                logger.info(LogTemplates.VOTE_PASSED, session_id, outcome.votes)
                session.skip()
            else:
                events.append(
                    VoteSkipUpdate(session_id=session_id, votes=outcome.votes, members=members)
                )
            return outcome

        return await self._run(session_id, "vote_skip", action)

    # =========================================================================
    # Persistence
    # =========================================================================

    async def save_queue(self, session_id: int, location: str) -> bool:
        """Snapshot under the lock, write outside it. False when nothing was saved."""
        async with self._registry.lock(session_id):
            session = self._registry.find(session_id)
            snapshot = Snapshot.from_session(session) if session and session.has_tracks else None

        if snapshot is None:
            error = NotFoundError("Queue", session_id, message=ErrorMessages.NO_ACTIVE_QUEUE)
            await self._forward_error(session_id, "save_queue", error)
            return False
        return await self._persistence.save(snapshot, location)

    async def load_queue(self, session_id: int, location: str) -> Snapshot | None:
        snapshot = await self._persistence.load(location)
        if snapshot is not None:
            await self._events.publish(
                QueueLoaded(session_id=session_id, location=location, snapshot=snapshot)
            )
        return snapshot

    async def restore_queue(self, session_id: int, snapshot: Snapshot) -> int:
        def action(session: PlaybackSession, events: list[SessionEvent]) -> int:
            count = session.apply_snapshot(snapshot)
            logger.info(LogTemplates.QUEUE_RESTORED, count, session_id)
            return count

        return await self._run(session_id, "restore_queue", action, create=True)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def destroy(
        self,
        session_id: int,
        reason: SessionDestroyReason = SessionDestroyReason.DISCONNECT,
    ) -> bool:
        """Tear down a session and leave its voice destination."""
        async with self._registry.lock(session_id):
            session = self._registry.find(session_id)
            if session is None:
                return False
            if session.has_tracks:
                session.stop()
            self._registry.remove(session_id)
            logger.info(LogTemplates.SESSION_DESTROYED, session_id, reason.value)

        if self._voice is not None:
            await self._voice.leave(session_id)
        await self._events.publish(Disconnect(session_id=session_id))
        return True

    async def handle_channel_empty(self, session_id: int) -> None:
        await self._events.publish(Empty(session_id=session_id))
        if self._leave_on_empty:
            await self.destroy(session_id, SessionDestroyReason.EMPTY)

    async def report_error(self, session_id: int, error: BaseException) -> None:
        """Forward a transport-side failure as an ``error`` event."""
        logger.error(LogTemplates.PLAYBACK_ERROR, session_id, error)
        await self._events.publish(
            PlaybackError(
                session_id=session_id,
                message=str(error) or type(error).__name__,
                error_type=type(error).__name__,
            )
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def now_playing(self, session_id: int) -> Track | None:
        session = self._registry.find(session_id)
        return session.now_playing if session else None

    def queue(self, session_id: int) -> list[Track]:
        session = self._registry.find(session_id)
        return list(session.queue) if session else []

    def queue_info(self, session_id: int) -> QueueInfo | None:
        session = self._registry.find(session_id)
        return session.queue_info() if session else None

    def progress_bar(self, session_id: int) -> str:
        session = self._registry.find(session_id)
        if session is None or not session.has_tracks:
            return ErrorMessages.NO_ACTIVE_QUEUE
        return session.progress_bar(self._progress_bar_length)

    def queue_json(self, session_id: int) -> str:
        """The queue as a JSON array of track views."""
        views = [TrackView.from_track(track) for track in self.queue(session_id)]
        return _TRACK_VIEWS.dump_json(views, by_alias=True, indent=2).decode("utf-8")

    async def history(self) -> list[HistoryEntry]:
        return await self._history.list()

    async def clear_history(self) -> int:
        return await self._history.clear()
