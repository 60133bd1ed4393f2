"""Persisted form of a playback session's queue.

Loading accepts any JSON object. Fields that have the expected shape come
back typed; anything else is kept as the raw decoded value, so a volume of
500, a repeat mode of "queue" or `"songs": null` still loads. Type and range
checks happen when a snapshot is applied to a live session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from session_player.domain.music.value_objects import track_id_from_url
from session_player.domain.shared.datetime_utils import format_duration

if TYPE_CHECKING:
    from session_player.domain.music.entities import PlaybackSession, Track

T = TypeVar("T")

_SNAPSHOT_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

# Typed when the value fits, otherwise the decoded JSON value as-is
Lenient = Annotated[T | Any, Field(union_mode="left_to_right")]


class TrackView(BaseModel):
    model_config = _SNAPSHOT_CONFIG

    title: str = ""
    url: str = ""
    duration: float = 0
    formatted_duration: str = ""
    requested_by: str = ""

    @classmethod
    def from_track(cls, track: Track) -> TrackView:
        return cls(
            title=track.title,
            url=track.url,
            duration=track.duration_seconds,
            formatted_duration=track.duration_formatted,
            requested_by=track.requested_by,
        )

    def to_track(self) -> Track:
        from session_player.domain.music.entities import Track

        return Track(
            id=track_id_from_url(self.url or self.title),
            title=self.title,
            url=self.url,
            duration_seconds=max(0.0, float(self.duration)),
            requested_by=self.requested_by,
        )

    @property
    def display_duration(self) -> str:
        return self.formatted_duration or format_duration(self.duration)


class Snapshot(BaseModel):
    model_config = _SNAPSHOT_CONFIG

    now_playing: Lenient[TrackView | None] = None
    songs: Lenient[list[TrackView]] = Field(default_factory=list)
    volume: Lenient[int] = 50
    repeat_mode: Lenient[int] = 0

    @classmethod
    def from_session(cls, session: PlaybackSession) -> Snapshot:
        songs = [TrackView.from_track(track) for track in session.queue]
        return cls(
            now_playing=songs[0] if songs else None,
            songs=songs,
            volume=session.volume,
            repeat_mode=int(session.repeat_mode),
        )

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True, indent=2).encode("utf-8")

    @classmethod
    def from_json(cls, data: bytes | str) -> Snapshot:
        return cls.model_validate_json(data)
