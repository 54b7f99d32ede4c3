"""
Room lifecycle for the Standoff server.

This module provides:
- Room: per-room phase state machine and round timers
- RoomRegistry: process-wide room and participant index
- RoomService: command routing used by the transport layer
- Notifier: the outbound event protocol
"""

from .errors import RoomError, ValidationFailed, GuardFailed, NotFound, RoomClosed
from .notifier import Notifier, NullNotifier, RecordingNotifier
from .timers import RoundTimer
from .room import Room
from .registry import RoomRegistry
from .service import RoomService

__all__ = [
    "RoomError",
    "ValidationFailed",
    "GuardFailed",
    "NotFound",
    "RoomClosed",
    "Notifier",
    "NullNotifier",
    "RecordingNotifier",
    "RoundTimer",
    "Room",
    "RoomRegistry",
    "RoomService",
]
