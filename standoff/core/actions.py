"""
Action definitions and utilities.

Players lock in a bare ActionType each round. This module provides:
- Slot arithmetic for move and shoot actions
- The PendingAction audit record
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any, Optional

from .types import ActionType, Trajectory

_MOVE_OFFSETS: Dict[ActionType, int] = {
    ActionType.MOVE_UP: -1,
    ActionType.MOVE_DOWN: 1,
}

_SHOT_TRAJECTORIES: Dict[ActionType, Trajectory] = {
    ActionType.SHOOT_STRAIGHT: Trajectory.STRAIGHT,
    ActionType.SHOOT_UP: Trajectory.UP,
    ActionType.SHOOT_DOWN: Trajectory.DOWN,
}


def move_target(slot: int, action: ActionType) -> Optional[int]:
    """
    Slot a move action is heading for, or None if the action is not a move.

    The result is not bounds-checked.
    """
    offset = _MOVE_OFFSETS.get(action)
    if offset is None:
        return None
    return slot + offset


def shot_trajectory(action: ActionType) -> Optional[Trajectory]:
    """Trajectory of a shoot action, or None for any other action."""
    return _SHOT_TRAJECTORIES.get(action)


def shot_target(slot: int, action: ActionType) -> Optional[int]:
    """
    Opposing slot a shoot action fired from `slot` aims at.

    Returns None if the action is not a shoot action. The result is not
    bounds-checked.
    """
    trajectory = shot_trajectory(action)
    if trajectory is None:
        return None
    return slot + trajectory.offset


@dataclass(frozen=True)
class PendingAction:
    """One accepted lock-in, kept as an audit trail for the current round."""

    player_id: str
    action: ActionType

    def to_dict(self) -> Dict[str, Any]:
        return {"player_id": self.player_id, "action": self.action.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PendingAction:
        return cls(player_id=data["player_id"], action=ActionType[data["action"]])
