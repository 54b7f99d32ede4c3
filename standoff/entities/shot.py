"""
ShotEvent - the record of one resolved shot, used for animation.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any

from ..core.types import Team, Trajectory, HitResult


@dataclass(frozen=True)
class ShotEvent:
    """
    Immutable outcome of a single shot.

    Attributes:
        id: Unique id within the room (monotonic across rounds)
        from_team: Shooter's team
        from_slot: Shooter's slot at the time of firing
        to_slot: Opposing slot the shot was aimed at
        trajectory: Straight, up or down
        hit: What absorbed the shot
    """

    id: str
    from_team: Team
    from_slot: int
    to_slot: int
    trajectory: Trajectory
    hit: HitResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "from_team": self.from_team.value,
            "from_slot": self.from_slot,
            "to_slot": self.to_slot,
            "trajectory": self.trajectory.value,
            "hit": self.hit.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ShotEvent:
        return cls(
            id=data["id"],
            from_team=Team(data["from_team"]),
            from_slot=data["from_slot"],
            to_slot=data["to_slot"],
            trajectory=Trajectory(data["trajectory"]),
            hit=HitResult(data["hit"]),
        )

    def __str__(self) -> str:
        return f"{self.id}: {self.from_team}#{self.from_slot} -> #{self.to_slot} ({self.trajectory}) {self.hit}"
