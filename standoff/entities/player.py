"""
Player entity - one participant on a lane.

A player has:
- Identity: opaque id supplied by the client, display name
- Placement: team and slot (UNASSIGNED when off the lanes)
- Combat state: hp, ammo, alive, covered
- Per-round intent: locked flag and chosen action
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any

from ..core.types import (
    Team,
    ActionType,
    UNASSIGNED,
    MAX_HP,
    MAX_AMMO,
    START_AMMO,
)


@dataclass
class Player:
    """
    A player in a room.

    Attributes:
        id: Opaque client-supplied identifier
        name: Display name
        team: Team affiliation (kept even while unassigned)
        slot: Lane index on the team's side, or UNASSIGNED
        hp: Hit points (0..MAX_HP)
        ammo: Rounds in the gun (0..MAX_AMMO)
        alive: False once hp reaches 0
        covered: Behind the lane's barrel this round
        locked: Action locked for the current round
        action: Action chosen for the current round
    """

    id: str
    name: str
    team: Team = Team.SHERIFFS
    slot: int = UNASSIGNED
    hp: int = MAX_HP
    ammo: int = START_AMMO
    alive: bool = True
    covered: bool = False
    locked: bool = False
    action: ActionType = ActionType.NONE

    def __post_init__(self):
        if not 0 <= self.hp <= MAX_HP:
            raise ValueError(f"HP out of range: {self.hp}")
        if not 0 <= self.ammo <= MAX_AMMO:
            raise ValueError(f"Ammo out of range: {self.ammo}")

    @property
    def is_assigned(self) -> bool:
        return self.slot != UNASSIGNED

    @property
    def is_active(self) -> bool:
        """Alive and standing on a lane; only active players take part in a round."""
        return self.alive and self.is_assigned

    def label(self) -> str:
        """Short label for logs."""
        return f"{self.team.value}#{self.slot}({self.name})"

    def reset_combat(self) -> None:
        """Restore combat and intent fields; placement is left alone."""
        self.hp = MAX_HP
        self.ammo = START_AMMO
        self.alive = True
        self.covered = False
        self.locked = False
        self.action = ActionType.NONE

    def clear_intent(self) -> None:
        self.locked = False
        self.action = ActionType.NONE

    def take_hit(self) -> None:
        """Lose one hp, dying at zero."""
        self.hp = max(0, self.hp - 1)
        if self.hp == 0:
            self.alive = False

    # ========================================================================
    # SERIALIZATION
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "team": self.team.value,
            "slot": self.slot,
            "hp": self.hp,
            "ammo": self.ammo,
            "alive": self.alive,
            "covered": self.covered,
            "locked": self.locked,
            "action": self.action.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Player:
        return cls(
            id=data["id"],
            name=data["name"],
            team=Team(data["team"]),
            slot=data["slot"],
            hp=data["hp"],
            ammo=data["ammo"],
            alive=data["alive"],
            covered=data["covered"],
            locked=data["locked"],
            action=ActionType[data["action"]],
        )
