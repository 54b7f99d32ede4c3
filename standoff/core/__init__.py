"""
Core types and constants for the Standoff engine.
"""

# Instead of from standoff.core.types import Team, you can do: from standoff.core import Team
from .types import (
    UNASSIGNED,
    MAX_HP,
    MAX_AMMO,
    START_AMMO,
    BARREL_HP,
    Team,
    ActionType,
    Trajectory,
    HitResult,
    Phase,
    Winner,
    ActionValidation,
)
from .actions import PendingAction, move_target, shot_target, shot_trajectory


__all__ = [
    "UNASSIGNED",
    "MAX_HP",
    "MAX_AMMO",
    "START_AMMO",
    "BARREL_HP",
    "Team",
    "ActionType",
    "Trajectory",
    "HitResult",
    "Phase",
    "Winner",
    "ActionValidation",
    "PendingAction",
    "move_target",
    "shot_target",
    "shot_trajectory",
]
