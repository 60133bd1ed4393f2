"""Core domain entities for the music bounded context."""

from __future__ import annotations

import math
import random

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from session_player.domain.filters.entities import FilterChain
from session_player.domain.music.snapshot import Snapshot, TrackView
from session_player.domain.music.value_objects import RepeatMode
from session_player.domain.shared.datetime_utils import format_duration, utcnow
from session_player.domain.shared.exceptions import InvalidArgumentError, NotFoundError
from session_player.domain.shared.messages import ErrorMessages
from session_player.domain.shared.types import (
    DurationSeconds,
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    SessionIdInt,
    TrackTitleStr,
    UtcDatetimeField,
    VolumeInt,
)

DEFAULT_VOLUME = 50
DEFAULT_VOLUME_STEP = 10


def _is_number(value: object) -> bool:
    return (
        not isinstance(value, bool)
        and isinstance(value, int | float)
        and not math.isnan(value)
    )


class Track(BaseModel):
    """Immutable value object representing a playable track."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: NonEmptyStr
    title: TrackTitleStr
    url: NonEmptyStr
    duration_seconds: DurationSeconds = 0
    requested_by: str = ""

    @property
    def duration_formatted(self) -> str:
        """Format duration as M:SS or H:MM:SS."""
        return format_duration(self.duration_seconds)

    @property
    def display_title(self) -> str:
        if self.duration_seconds:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title


class QueueInfo(BaseModel):
    now_playing: Track | None
    queue_length: NonNegativeInt
    total_duration: NonNegativeFloat
    volume: VolumeInt


class PlaybackSession(BaseModel):
    """Aggregate root holding the queue and transport state of one destination.

    ``queue[0]`` is the track now playing. Every mutator except ``enqueue``
    raises ``NotFoundError`` while the queue is empty.
    """

    session_id: SessionIdInt
    queue: list[Track] = Field(default_factory=list)
    volume: VolumeInt = DEFAULT_VOLUME
    repeat_mode: RepeatMode = RepeatMode.OFF
    paused: bool = False
    position_seconds: NonNegativeFloat = 0.0
    filters: FilterChain = Field(default_factory=FilterChain)
    autoplay: bool = False
    destroyed: bool = False
    # Bumped on every "now playing" transition
    track_changes: NonNegativeInt = 0
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    last_activity: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def now_playing(self) -> Track | None:
        return self.queue[0] if self.queue else None

    @property
    def queue_length(self) -> int:
        return len(self.queue)

    @property
    def has_tracks(self) -> bool:
        return bool(self.queue)

    def touch(self) -> None:
        """Update last activity timestamp."""
        self.last_activity = utcnow()

    def require_active(self) -> None:
        if not self.queue:
            raise NotFoundError("Queue", self.session_id, message=ErrorMessages.NO_ACTIVE_QUEUE)

    def _start_head(self) -> None:
        self.position_seconds = 0.0
        self.paused = False
        self.track_changes += 1

    def _validate_index(self, index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidArgumentError(ErrorMessages.INVALID_SONG_INDEX, field="index")
        if index < 1 or index > len(self.queue):
            raise InvalidArgumentError(ErrorMessages.INVALID_SONG_INDEX, field="index")
        return index

    # === Queue ===

    def enqueue(self, track: Track) -> int:
        """Append a track and return its zero-based position."""
        self.queue.append(track)
        if len(self.queue) == 1:
            self._start_head()
        self.touch()
        return len(self.queue) - 1

    def enqueue_many(self, tracks: list[Track]) -> int:
        """Append several tracks in order and return the position of the first."""
        start = len(self.queue)
        if not tracks:
            return start
        was_empty = not self.queue
        self.queue.extend(tracks)
        if was_empty:
            self._start_head()
        self.touch()
        return start

    def skip(self) -> Track | None:
        """Advance according to the repeat mode and return the new head."""
        self.require_active()
        if self.repeat_mode == RepeatMode.TRACK:
            self.position_seconds = 0.0
            self.touch()
            return self.queue[0]

        head = self.queue.pop(0)
        if self.repeat_mode == RepeatMode.QUEUE:
            self.queue.append(head)

        if self.queue:
            self._start_head()
        else:
            self.position_seconds = 0.0
            self.paused = False
        self.touch()
        return self.now_playing

    def jump(self, index: int) -> Track | None:
        """Drop every entry before the 1-based ``index`` and then advance."""
        self.require_active()
        self._validate_index(index)
        del self.queue[: index - 1]
        return self.skip()

    def remove(self, index: int) -> Track:
        """Remove one upcoming entry by 1-based index; index 1 is now playing."""
        self.require_active()
        if index == 1 and not isinstance(index, bool):
            raise InvalidArgumentError(ErrorMessages.CANNOT_REMOVE_NOW_PLAYING, field="index")
        self._validate_index(index)
        track = self.queue.pop(index - 1)
        self.touch()
        return track

    def clear_queue(self) -> int:
        """Keep only the track now playing and return the count removed."""
        self.require_active()
        count = len(self.queue) - 1
        del self.queue[1:]
        self.touch()
        return count

    def shuffle(self, rng: random.Random | None = None) -> None:
        """Uniformly permute the upcoming tracks; the head stays in place."""
        self.require_active()
        tail = self.queue[1:]
        (rng or random).shuffle(tail)
        self.queue[1:] = tail
        self.touch()

    def stop(self) -> int:
        """Clear the queue and mark the session for destruction."""
        self.require_active()
        count = len(self.queue)
        self.queue.clear()
        self.paused = False
        self.position_seconds = 0.0
        self.destroyed = True
        self.touch()
        return count

    # === Transport ===

    def pause(self) -> None:
        self.require_active()
        if self.paused:
            raise InvalidArgumentError(ErrorMessages.ALREADY_PAUSED)
        self.paused = True
        self.touch()

    def resume(self) -> None:
        self.require_active()
        if not self.paused:
            raise InvalidArgumentError(ErrorMessages.NOT_PAUSED)
        self.paused = False
        self.touch()

    def toggle_pause(self) -> bool:
        """Resume when paused, pause otherwise; returns the new paused flag."""
        if self.paused:
            self.resume()
        else:
            self.pause()
        return self.paused

    def set_volume(self, volume: int | float) -> int:
        self.require_active()
        if not _is_number(volume) or volume < 0 or volume > 100:
            raise InvalidArgumentError(ErrorMessages.INVALID_VOLUME, field="volume")
        self.volume = int(round(volume))
        self.touch()
        return self.volume

    def increase_volume(self, step: int | float = DEFAULT_VOLUME_STEP) -> int:
        return self._shift_volume(step)

    def decrease_volume(self, step: int | float = DEFAULT_VOLUME_STEP) -> int:
        return self._shift_volume(-step if _is_number(step) else step)

    def _shift_volume(self, delta: int | float) -> int:
        self.require_active()
        if not _is_number(delta) or math.isinf(delta):
            raise InvalidArgumentError(ErrorMessages.INVALID_VOLUME_STEP, field="step")
        self.volume = int(round(min(100, max(0, self.volume + delta))))
        self.touch()
        return self.volume

    def set_loop(self, mode: str | int | RepeatMode) -> RepeatMode:
        self.require_active()
        self.repeat_mode = RepeatMode.parse(mode)
        self.touch()
        return self.repeat_mode

    def seek(self, seconds: int | float) -> None:
        self.require_active()
        if not _is_number(seconds) or seconds < 0 or math.isinf(seconds):
            raise InvalidArgumentError(ErrorMessages.INVALID_SEEK, field="seconds")
        self.position_seconds = float(seconds)
        self.touch()

    def replay(self) -> None:
        self.seek(0)

    def toggle_autoplay(self) -> bool:
        self.require_active()
        self.autoplay = not self.autoplay
        self.touch()
        return self.autoplay

    # === Snapshots and views ===

    def apply_snapshot(self, snapshot: Snapshot) -> int:
        """Append a snapshot's songs and adopt its volume and repeat mode.

        Volume and repeat mode are checked before any track is appended, so a
        malformed snapshot leaves the session untouched.
        """
        volume = snapshot.volume
        if not _is_number(volume) or volume < 0 or volume > 100:
            raise InvalidArgumentError(ErrorMessages.INVALID_VOLUME, field="volume")
        repeat_mode = RepeatMode.parse(snapshot.repeat_mode)
        if not isinstance(snapshot.songs, list):
            raise InvalidArgumentError(ErrorMessages.MALFORMED_SNAPSHOT_SONGS, field="songs")

        try:
            tracks = [TrackView.model_validate(song).to_track() for song in snapshot.songs]
        except ValidationError as e:
            raise InvalidArgumentError(
                ErrorMessages.MALFORMED_SNAPSHOT_TRACK.format(count=e.error_count()), field="songs"
            ) from e
        self.enqueue_many(tracks)
        self.volume = int(round(volume))
        self.repeat_mode = repeat_mode
        return len(tracks)

    def queue_info(self) -> QueueInfo:
        return QueueInfo(
            now_playing=self.now_playing,
            queue_length=len(self.queue),
            total_duration=sum(track.duration_seconds for track in self.queue),
            volume=self.volume,
        )

    def progress_bar(self, length: int = 20) -> str:
        """Render the playback position of the current track as a text bar."""
        self.require_active()
        total = self.queue[0].duration_seconds
        current = self.position_seconds
        progress = round(current / total * length) if total > 0 else 0
        progress = min(length, max(0, progress))
        bar = "▬" * progress + "🔵" + "▬" * (length - progress)
        return f"`{format_duration(current)}` {bar} `{format_duration(total)}`"
