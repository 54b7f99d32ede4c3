"""
Game state management for the Standoff engine.

This module provides:
- GameConfig: Room configuration and its canonical bounds
- GameState: The aggregate root of a room's game
"""

from .config import (
    GameConfig,
    DEFAULT_TICK_DURATION,
    MIN_TICK_DURATION,
    MAX_TICK_DURATION,
    DEFAULT_SLOTS_PER_SIDE,
    MIN_SLOTS_PER_SIDE,
    MAX_SLOTS_PER_SIDE,
)
from .state import GameState

__all__ = [
    "GameConfig",
    "GameState",
    "DEFAULT_TICK_DURATION",
    "MIN_TICK_DURATION",
    "MAX_TICK_DURATION",
    "DEFAULT_SLOTS_PER_SIDE",
    "MIN_SLOTS_PER_SIDE",
    "MAX_SLOTS_PER_SIDE",
]
