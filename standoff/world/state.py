"""
GameState - the aggregate root of one room's game.

The GameState holds:
- Room identity and phase
- Round counter and round timing
- Configuration
- Players (ordered; list order is the resolution tie-break)
- Barrels
- Winner, this round's lock audit trail and last round's shot events

It does NOT handle:
- Action resolution (delegated to standoff.resolver)
- Phase transitions and timers (owned by rooms.Room)
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Any

from .config import GameConfig
from ..entities.player import Player
from ..entities.barrel import Barrel, build_barrels
from ..entities.shot import ShotEvent
from ..core.types import Team, Phase, Winner
from ..core.actions import PendingAction


class GameState:
    """
    Complete, serializable state of a room.

    Attributes:
        room_code: Four-letter room code
        phase: Current lifecycle phase
        round: Round counter (0 in lobby, 1 for the first planning window)
        config: Room configuration
        players: Players in join order
        barrels: Exactly 2 * slots_per_side barrels
        winner: Set once the game has ended
        round_started_at: Epoch milliseconds the current planning window opened
        pending_actions: Locks accepted this round, in arrival order
        last_events: Shot events of the most recent resolution
        shot_counter: Highest shot id number minted in this room so far
    """

    def __init__(self, room_code: str, config: Optional[GameConfig] = None):
        self.room_code = room_code
        self.config = config if config is not None else GameConfig()

        # Game flow
        self.phase: Phase = Phase.LOBBY
        self.round: int = 0
        self.winner: Optional[Winner] = None
        self.round_started_at: Optional[int] = None

        # Participants and cover
        self.players: List[Player] = []
        self.barrels: List[Barrel] = build_barrels(self.config.slots_per_side)

        # Per-round bookkeeping
        self.pending_actions: List[PendingAction] = []
        self.last_events: List[ShotEvent] = []
        self.shot_counter: int = 0

    # ========================================================================
    # PLAYER QUERIES
    # ========================================================================

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_team_players(self, team: Team, assigned_only: bool = True) -> List[Player]:
        """Players of a team in list order, optionally only those on a lane."""
        return [
            p for p in self.players
            if p.team == team and (p.is_assigned or not assigned_only)
        ]

    def get_active_players(self) -> List[Player]:
        """Living, slot-assigned players in list order."""
        return [p for p in self.players if p.is_active]

    def count_alive(self, team: Team) -> int:
        return sum(1 for p in self.players if p.team == team and p.is_active)

    def player_at(self, team: Team, slot: int) -> Optional[Player]:
        """Living player standing on (team, slot), if any."""
        for player in self.players:
            if player.team == team and player.slot == slot and player.is_active:
                return player
        return None

    def free_slot(self, team: Team, exclude_id: Optional[str] = None) -> Optional[int]:
        """
        Lowest slot on `team` not taken by any assigned player.

        Args:
            team: Team to search
            exclude_id: Player whose own slot should count as free

        Returns:
            Slot index, or None if the team is full
        """
        taken = {
            p.slot for p in self.players
            if p.team == team and p.is_assigned and p.id != exclude_id
        }
        for slot in range(self.config.slots_per_side):
            if slot not in taken:
                return slot
        return None

    # ========================================================================
    # BARRELS
    # ========================================================================

    def get_barrel(self, team: Team, slot: int) -> Optional[Barrel]:
        for barrel in self.barrels:
            if barrel.team == team and barrel.slot == slot:
                return barrel
        return None

    def rebuild_barrels(self) -> None:
        self.barrels = build_barrels(self.config.slots_per_side)

    def repair_barrels(self) -> None:
        for barrel in self.barrels:
            barrel.repair()

    # ========================================================================
    # SERIALIZATION
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-compatible dict.

        This is the canonical snapshot broadcast to every client.
        """
        return {
            "room_code": self.room_code,
            "phase": self.phase.value,
            "round": self.round,
            "config": self.config.to_dict(),
            "players": [p.to_dict() for p in self.players],
            "barrels": [b.to_dict() for b in self.barrels],
            "winner": self.winner.value if self.winner else None,
            "round_started_at": self.round_started_at,
            "pending_actions": [a.to_dict() for a in self.pending_actions],
            "last_events": [e.to_dict() for e in self.last_events],
            "shot_counter": self.shot_counter,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameState:
        """
        Deserialize from a dict produced by to_dict().
        """
        state = cls(data["room_code"], GameConfig.from_dict(data["config"]))
        state.phase = Phase(data["phase"])
        state.round = data["round"]
        state.winner = Winner(data["winner"]) if data.get("winner") else None
        state.round_started_at = data.get("round_started_at")
        state.players = [Player.from_dict(p) for p in data["players"]]
        state.barrels = [Barrel.from_dict(b) for b in data["barrels"]]
        state.pending_actions = [PendingAction.from_dict(a) for a in data.get("pending_actions", [])]
        state.last_events = [ShotEvent.from_dict(e) for e in data.get("last_events", [])]
        state.shot_counter = data.get("shot_counter", 0)
        return state

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=True)

    @classmethod
    def from_json(cls, json_str: str) -> GameState:
        return cls.from_dict(json.loads(json_str))

    def clone(self) -> GameState:
        """
        Create a deep copy of this state.

        Returns:
            Independent copy sharing no mutable objects with this one
        """
        return GameState.from_dict(self.to_dict())

    def __str__(self) -> str:
        return (f"GameState(room={self.room_code}, phase={self.phase}, round={self.round}, "
                f"sheriffs={self.count_alive(Team.SHERIFFS)}, outlaws={self.count_alive(Team.OUTLAWS)})")

    def __repr__(self) -> str:
        return (f"GameState(room_code={self.room_code!r}, phase={self.phase}, round={self.round}, "
                f"players={len(self.players)}, winner={self.winner})")
