"""
Filters Bounded Context

Ordered audio post-processing chain applied during playback.
"""

from session_player.domain.filters.entities import FilterChain
from session_player.domain.filters.value_objects import (
    CompositeFilter,
    EqualizerPreset,
    FilterSpec,
)

__all__ = [
    "FilterChain",
    "FilterSpec",
    "CompositeFilter",
    "EqualizerPreset",
]
