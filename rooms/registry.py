"""
RoomRegistry - the process-wide index of rooms and participants.

Created once at startup and handed to whatever dispatches commands. It maps
room codes to Room objects and participant ids (players and hosts) to the
code of the room they are routed to. Both maps are guarded by a lock so any
room's actor can read or update them.
"""

from __future__ import annotations

import random
import threading
from typing import Dict, Optional

from standoff.world import GameConfig
from infra.logger import get_logger
from infra.settings import DEFAULT_RESOLUTION_DELAY_MS

from .notifier import Notifier
from .room import Room

log = get_logger(__name__)

# I and O are left out so codes can't be misread as 1 and 0
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ"
ROOM_CODE_LENGTH = 4


class RoomRegistry:
    """
    Rooms by code and participants by id.

    Attributes:
        notifier: Passed to every room this registry creates
    """

    def __init__(
        self,
        notifier: Optional[Notifier] = None,
        *,
        rng: Optional[random.Random] = None,
        resolution_delay_ms: int = DEFAULT_RESOLUTION_DELAY_MS,
    ):
        self.notifier = notifier
        self._rng = rng or random.Random()
        self._resolution_delay_ms = resolution_delay_ms
        self._rooms: Dict[str, Room] = {}
        self._participants: Dict[str, str] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------#
    # Rooms
    # ------------------------------------------------------------------#
    def create(self, host_id: str, config: Optional[GameConfig] = None) -> Room:
        """
        Open a new room with a fresh code and route the host to it.
        """
        with self._lock:
            code = self._generate_code()
            room = Room(
                code,
                host_id,
                config,
                notifier=self.notifier,
                rng=random.Random(self._rng.random()),
                resolution_delay_ms=self._resolution_delay_ms,
            )
            self._rooms[code] = room
            self._participants[host_id] = code
        log.info("room %s created by %s", code, host_id)
        return room

    def get(self, code: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(code)

    def destroy(self, code: str) -> Optional[Room]:
        """
        Forget a room and every participant routed to it.

        Returns:
            The removed room, or None if the code was unknown
        """
        with self._lock:
            room = self._rooms.pop(code, None)
            if room is None:
                return None
            stale = [pid for pid, room_code in self._participants.items() if room_code == code]
            for pid in stale:
                del self._participants[pid]
        log.info("room %s destroyed (%d participant mappings dropped)", code, len(stale))
        return room

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    # ------------------------------------------------------------------#
    # Participants
    # ------------------------------------------------------------------#
    def bind(self, participant_id: str, code: str) -> None:
        with self._lock:
            self._participants[participant_id] = code

    def unbind(self, participant_id: str, code: Optional[str] = None) -> Optional[str]:
        """
        Drop a participant's routing entry.

        Args:
            participant_id: Player or host id
            code: Only drop the entry if it still points at this room

        Returns:
            The code that was removed, or None if nothing was removed
        """
        with self._lock:
            current = self._participants.get(participant_id)
            if current is None or (code is not None and current != code):
                return None
            del self._participants[participant_id]
            return current

    def room_code_for(self, participant_id: str) -> Optional[str]:
        with self._lock:
            return self._participants.get(participant_id)

    def room_for(self, participant_id: str) -> Optional[Room]:
        with self._lock:
            code = self._participants.get(participant_id)
            return self._rooms.get(code) if code is not None else None

    # ------------------------------------------------------------------#
    # Helpers
    # ------------------------------------------------------------------#
    def _generate_code(self) -> str:
        while True:
            code = "".join(self._rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))
            if code not in self._rooms:
                return code
