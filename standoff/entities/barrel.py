"""
Barrel entity - destructible cover on one (team, slot) lane.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any, List

from ..core.types import Team, BARREL_HP


@dataclass
class Barrel:
    """
    Cover in front of a slot. A barrel with hp 0 is destroyed and gives no cover.
    """

    team: Team
    slot: int
    hp: int = BARREL_HP

    @property
    def intact(self) -> bool:
        return self.hp > 0

    def absorb_hit(self) -> None:
        self.hp = max(0, self.hp - 1)

    def repair(self) -> None:
        self.hp = BARREL_HP

    def to_dict(self) -> Dict[str, Any]:
        return {"team": self.team.value, "slot": self.slot, "hp": self.hp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Barrel:
        return cls(team=Team(data["team"]), slot=data["slot"], hp=data["hp"])


def build_barrels(slots_per_side: int) -> List[Barrel]:
    """One fresh barrel per (team, slot), interleaved sheriffs/outlaws by slot."""
    barrels: List[Barrel] = []
    for slot in range(slots_per_side):
        barrels.append(Barrel(team=Team.SHERIFFS, slot=slot))
        barrels.append(Barrel(team=Team.OUTLAWS, slot=slot))
    return barrels
