"""
Entity definitions for the Standoff engine.

This module exports:
- Player (a participant on a lane)
- Barrel (destructible cover)
- ShotEvent (resolved shot record)
"""

from .player import Player
from .barrel import Barrel, build_barrels
from .shot import ShotEvent

__all__ = [
    "Player",
    "Barrel",
    "build_barrels",
    "ShotEvent",
]
