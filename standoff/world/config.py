"""
GameConfig - per-room tunables and their canonical bounds.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Dict, Any, Optional

DEFAULT_TICK_DURATION = 4000
MIN_TICK_DURATION = 1000
MAX_TICK_DURATION = 10000

DEFAULT_SLOTS_PER_SIDE = 5
MIN_SLOTS_PER_SIDE = 2
MAX_SLOTS_PER_SIDE = 8


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass
class GameConfig:
    """
    Room configuration.

    The constructor does not enforce the bounds so tests and tools can build
    short rounds; anything coming from a client goes through clamped().

    Attributes:
        tick_duration: Length of the planning window in milliseconds
        slots_per_side: Number of lanes per team
    """

    tick_duration: int = DEFAULT_TICK_DURATION
    slots_per_side: int = DEFAULT_SLOTS_PER_SIDE

    def __post_init__(self):
        if self.tick_duration <= 0:
            raise ValueError(f"Tick duration must be positive: {self.tick_duration}")
        if self.slots_per_side <= 0:
            raise ValueError(f"Slots per side must be positive: {self.slots_per_side}")

    def clamped(self) -> GameConfig:
        """Copy of this config with both fields forced into their bounds."""
        return GameConfig(
            tick_duration=_clamp(int(self.tick_duration), MIN_TICK_DURATION, MAX_TICK_DURATION),
            slots_per_side=_clamp(int(self.slots_per_side), MIN_SLOTS_PER_SIDE, MAX_SLOTS_PER_SIDE),
        )

    def merged(
        self,
        tick_duration: Optional[int] = None,
        slots_per_side: Optional[int] = None,
    ) -> GameConfig:
        """
        Apply a partial update and clamp only the fields that were given.
        """
        updated = replace(self)
        if tick_duration is not None:
            updated.tick_duration = _clamp(int(tick_duration), MIN_TICK_DURATION, MAX_TICK_DURATION)
        if slots_per_side is not None:
            updated.slots_per_side = _clamp(int(slots_per_side), MIN_SLOTS_PER_SIDE, MAX_SLOTS_PER_SIDE)
        return updated

    def in_range(self, slot: int) -> bool:
        return 0 <= slot < self.slots_per_side

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick_duration": self.tick_duration,
            "slots_per_side": self.slots_per_side,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameConfig:
        return cls(
            tick_duration=data.get("tick_duration", DEFAULT_TICK_DURATION),
            slots_per_side=data.get("slots_per_side", DEFAULT_SLOTS_PER_SIDE),
        )
