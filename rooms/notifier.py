"""
Outbound notifications.

Rooms do not know about sockets. They publish events through a Notifier
and whatever owns the transport fans them out.
"""

from __future__ import annotations

from typing import Any, Dict, List, Protocol, Tuple

GAME_STATE = "game_state"
ROUND_START = "round_start"
ROUND_END = "round_end"
GAME_ENDED = "game_ended"
ACTION_LOCKED = "action_locked"


class Notifier(Protocol):
    async def publish(self, room_code: str, event: str, payload: Dict[str, Any]) -> None:
        ...


class NullNotifier:
    """Discards everything."""

    async def publish(self, room_code: str, event: str, payload: Dict[str, Any]) -> None:
        return None


class RecordingNotifier:
    """Keeps every published event in order."""

    def __init__(self):
        self.events: List[Tuple[str, str, Dict[str, Any]]] = []

    async def publish(self, room_code: str, event: str, payload: Dict[str, Any]) -> None:
        self.events.append((room_code, event, payload))

    def of_type(self, event: str) -> List[Dict[str, Any]]:
        return [payload for _, name, payload in self.events if name == event]

    def names(self) -> List[str]:
        return [name for _, name, _ in self.events]

    def clear(self) -> None:
        self.events.clear()
