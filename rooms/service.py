"""
RoomService - the command surface of the game server.

Transport code calls these methods with already-validated payloads. The
service resolves room codes and participant ids through the registry and
forwards to the right Room; it holds no game state of its own.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from standoff.core.types import Team, ActionType
from standoff.entities import Player
from standoff.world import GameConfig
from infra.logger import get_logger

from .errors import GuardFailed, NotFound
from .registry import RoomRegistry
from .room import Room

log = get_logger(__name__)


class RoomService:
    """
    Routes inbound commands to rooms.

    Attributes:
        registry: Process-wide room and participant index
    """

    def __init__(self, registry: RoomRegistry):
        self.registry = registry

    # ------------------------------------------------------------------#
    # Host commands
    # ------------------------------------------------------------------#
    async def create_room(self, host_id: str, config: Optional[GameConfig] = None) -> Room:
        config = (config or GameConfig()).clamped()
        room = self.registry.create(host_id, config)
        return room

    async def resume_host(self, room_code: str, host_id: str) -> Dict[str, Any]:
        room = self._room(room_code)
        snapshot = await room.resume_host(host_id)
        self.registry.bind(host_id, room.code)
        return snapshot

    async def update_config(
        self,
        room_code: str,
        host_id: str,
        tick_duration: Optional[int] = None,
        slots_per_side: Optional[int] = None,
    ) -> GameConfig:
        room = self._room(room_code)
        return await room.update_config(
            host_id,
            tick_duration=tick_duration,
            slots_per_side=slots_per_side,
        )

    async def end_session(self, room_code: str, host_id: str) -> None:
        """Close the room and drop every id routed to it."""
        room = self._room(room_code)
        if not room.is_host(host_id):
            raise GuardFailed("Only the host can end the session", "NOT_HOST")
        await room.end_session()
        self.registry.destroy(room.code)

    # ------------------------------------------------------------------#
    # Player commands
    # ------------------------------------------------------------------#
    async def join(self, room_code: str, player_id: str, name: str) -> Player:
        room = self._room(room_code)
        player = await room.join(player_id, name)
        self.registry.bind(player_id, room.code)
        return player

    async def select_team(self, player_id: str, team: Team) -> Player:
        return await self._room_of(player_id).select_team(player_id, team)

    async def leave_team(self, player_id: str) -> Player:
        return await self._room_of(player_id).leave_team(player_id)

    async def lock_action(self, player_id: str, action: ActionType) -> Player:
        return await self._room_of(player_id).lock_action(player_id, action)

    async def start_game(self, room_code: str) -> None:
        await self._room(room_code).start_game()

    async def play_again(self, room_code: str) -> None:
        await self._room(room_code).play_again()

    # ------------------------------------------------------------------#
    # Connection lifecycle
    # ------------------------------------------------------------------#
    def disconnect(self, participant_id: str, room_code: Optional[str] = None) -> None:
        """
        Drop the live routing entry only; the player's record stays in the
        room so they can rejoin with the same id.

        With `room_code`, an entry that has since been bound to another
        room is left alone.
        """
        code = self.registry.unbind(participant_id, room_code)
        if code is not None:
            log.debug("%s disconnected from %s", participant_id, code)

    def get_state(self, room_code: str) -> Dict[str, Any]:
        return self._room(room_code).snapshot()

    def room_code_for(self, participant_id: str) -> Optional[str]:
        return self.registry.room_code_for(participant_id)

    # ------------------------------------------------------------------#
    # Helpers
    # ------------------------------------------------------------------#
    def _room(self, room_code: str) -> Room:
        room = self.registry.get(room_code.upper())
        if room is None:
            raise NotFound("Room not found", "ROOM_NOT_FOUND")
        return room

    def _room_of(self, participant_id: str) -> Room:
        room = self.registry.room_for(participant_id)
        if room is None:
            raise NotFound("Not in a room", "NOT_IN_ROOM")
        return room
