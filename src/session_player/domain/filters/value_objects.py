"""Immutable value objects for the audio filter bounded context."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from session_player.domain.shared.exceptions import InvalidArgumentError
from session_player.domain.shared.messages import ErrorMessages
from session_player.domain.shared.types import NonEmptyStr

FilterParamValue = str | int | float


def canonical_filter_name(name: str) -> str:
    """Normalise a user-supplied filter name; blank names are rejected."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(ErrorMessages.INVALID_FILTER, field="name")
    return name.strip().lower()


class FilterSpec(BaseModel):
    """One named effect in a filter chain."""

    model_config = ConfigDict(frozen=True)

    name: NonEmptyStr
    params: dict[str, FilterParamValue] = Field(default_factory=dict)
    # Rendered ffmpeg expression when it differs from "name=k=v:k=v"
    expression: str | None = None

    def as_ffmpeg(self) -> str:
        if self.expression:
            return self.expression
        if not self.params:
            return self.name
        args = ":".join(f"{key}={value}" for key, value in self.params.items())
        return f"{self.name}={args}"


class CompositeFilter(str, Enum):
    """Canonical names owned by the replace-on-set convenience operations."""

    EQUALIZER = "equalizer"
    SPEED = "speed"
    CROSSFADE = "crossfade"
    TRANSITION = "transition"
    LOUDNORM = "loudnorm"


class EqualizerPreset(str, Enum):
    """Fixed equalizer presets and their ffmpeg expressions."""

    BASS = "bass"
    TREBLE = "treble"
    NORMAL = "normal"

    @property
    def expression(self) -> str:
        return {
            EqualizerPreset.BASS: "bass=g=10",
            EqualizerPreset.TREBLE: "treble=g=5",
            EqualizerPreset.NORMAL: "aecho=0.8:0.9:1000:0.3",
        }[self]

    @classmethod
    def parse(cls, value: str) -> EqualizerPreset:
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidArgumentError(ErrorMessages.INVALID_EQUALIZER, field="preset") from None
