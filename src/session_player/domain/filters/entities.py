"""Filter chain aggregate.

Two insertion policies coexist under distinct names:

- ``add`` / ``remove`` are strict: adding an existing name raises
  ``ConflictError`` and removing a missing one raises ``NotFoundError``.
  ``add_many`` applies ``add`` to a batch, skipping blank entries, and
  leaves the chain untouched if any add fails.
- ``set_equalizer``, ``set_speed``, ``set_crossfade``, ``set_transition`` and
  ``normalize_loudness`` replace whatever entry already holds their canonical
  name, keeping its position in the chain.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import BaseModel, Field

from session_player.domain.filters.value_objects import (
    CompositeFilter,
    EqualizerPreset,
    FilterParamValue,
    FilterSpec,
    canonical_filter_name,
)
from session_player.domain.shared.exceptions import (
    ConflictError,
    DomainError,
    InvalidArgumentError,
    NotFoundError,
)
from session_player.domain.shared.messages import ErrorMessages

MIN_SPEED = 0.5
MAX_SPEED = 2.0


def _require_number(value: object, message: str, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float) or math.isnan(value):
        raise InvalidArgumentError(message, field=field)
    return float(value)


def _format_number(value: float) -> str:
    return f"{value:g}"


class FilterChain(BaseModel):
    """Ordered, name-unique list of effects in pipeline application order."""

    entries: list[FilterSpec] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str) or not name.strip():
            return False
        return self._index_of(name.strip().lower()) is not None

    def _index_of(self, name: str) -> int | None:
        for index, entry in enumerate(self.entries):
            if entry.name == name:
                return index
        return None

    # === Strict operations ===

    def add(self, name: str, params: dict[str, FilterParamValue] | None = None) -> FilterSpec:
        """Append a filter; fails if the name is already in the chain."""
        canonical = canonical_filter_name(name)
        if self._index_of(canonical) is not None:
            raise ConflictError(
                "Filter",
                canonical,
                message=ErrorMessages.FILTER_ALREADY_ACTIVE.format(name=canonical),
            )
        spec = FilterSpec(name=canonical, params=dict(params or {}))
        self.entries.append(spec)
        return spec

    def add_many(self, names: Sequence[object]) -> list[FilterSpec]:
        """Add every non-blank string name in order. Other entries are skipped."""
        if isinstance(names, str) or not isinstance(names, Sequence):
            raise InvalidArgumentError(ErrorMessages.FILTERS_NOT_A_LIST, field="names")
        before = list(self.entries)
        try:
            return [self.add(name) for name in names if isinstance(name, str) and name.strip()]
        except DomainError:
            self.entries[:] = before
            raise

    def remove(self, name: str) -> FilterSpec:
        """Remove a filter by name; fails if it is not active."""
        canonical = canonical_filter_name(name)
        index = self._index_of(canonical)
        if index is None:
            raise NotFoundError(
                "Filter",
                canonical,
                message=ErrorMessages.FILTER_NOT_ACTIVE.format(name=canonical),
            )
        return self.entries.pop(index)

    def clear(self) -> int:
        count = len(self.entries)
        self.entries.clear()
        return count

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def get(self, name: str) -> FilterSpec | None:
        index = self._index_of(canonical_filter_name(name))
        return None if index is None else self.entries[index]

    # === Replace-on-set operations ===

    def _replace(self, spec: FilterSpec) -> FilterSpec:
        index = self._index_of(spec.name)
        if index is None:
            self.entries.append(spec)
        else:
            self.entries[index] = spec
        return spec

    def set_equalizer(self, preset: str | EqualizerPreset = EqualizerPreset.BASS) -> FilterSpec:
        parsed = preset if isinstance(preset, EqualizerPreset) else EqualizerPreset.parse(preset)
        return self._replace(
            FilterSpec(
                name=CompositeFilter.EQUALIZER.value,
                params={"preset": parsed.value},
                expression=parsed.expression,
            )
        )

    def set_speed(self, speed: float = 1.0) -> FilterSpec:
        value = _require_number(speed, ErrorMessages.INVALID_SPEED, "speed")
        if value < MIN_SPEED or value > MAX_SPEED:
            raise InvalidArgumentError(ErrorMessages.INVALID_SPEED, field="speed")
        return self._replace(
            FilterSpec(
                name=CompositeFilter.SPEED.value,
                params={"speed": value},
                expression=f"atempo={_format_number(value)}",
            )
        )

    def set_crossfade(self, duration: float = 5) -> FilterSpec:
        value = self._fade_duration(duration)
        return self._replace(
            FilterSpec(
                name=CompositeFilter.CROSSFADE.value,
                params={"d": value},
                expression=f"acrossfade=d={_format_number(value)}",
            )
        )

    def set_transition(self, duration: float = 3) -> FilterSpec:
        value = self._fade_duration(duration)
        return self._replace(
            FilterSpec(
                name=CompositeFilter.TRANSITION.value,
                params={"d": value},
                expression=f"afade=t=in:ss=0:d={_format_number(value)}",
            )
        )

    def normalize_loudness(self) -> FilterSpec:
        return self._replace(FilterSpec(name=CompositeFilter.LOUDNORM.value))

    @staticmethod
    def _fade_duration(duration: float) -> float:
        value = _require_number(duration, ErrorMessages.INVALID_FADE_DURATION, "duration")
        if value <= 0 or math.isinf(value):
            raise InvalidArgumentError(ErrorMessages.INVALID_FADE_DURATION, field="duration")
        return value

    # === Rendering ===

    def to_ffmpeg(self) -> str:
        """Render the chain as a comma-separated ffmpeg ``-af`` expression."""
        return ",".join(entry.as_ffmpeg() for entry in self.entries)
