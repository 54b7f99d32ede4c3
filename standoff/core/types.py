"""
Core type definitions for the Standoff engine.

This module contains all fundamental types, enums, and constants used
throughout the system. No logic, just pure data structures.
"""

from __future__ import annotations
from enum import Enum
from dataclasses import dataclass

# ============================================================================
# CONSTANTS
# ============================================================================

# Slot value for a player who is in the room but not on a lane
UNASSIGNED = -1

MAX_HP = 3
MAX_AMMO = 3
START_AMMO = 1
BARREL_HP = 3


# ============================================================================
# TEAMS
# ============================================================================

class Team(Enum):
    """Team affiliation for players and barrels."""
    SHERIFFS = "sheriffs"
    OUTLAWS = "outlaws"

    def __str__(self) -> str:
        return self.value

    @property
    def opponent(self) -> Team:
        """Get the opposing team."""
        return Team.OUTLAWS if self == Team.SHERIFFS else Team.SHERIFFS


# ============================================================================
# ACTIONS
# ============================================================================

class ActionType(Enum):
    """The eight actions a player can lock in for a round."""
    MOVE_UP = "MOVE_UP"
    MOVE_DOWN = "MOVE_DOWN"
    COVER = "COVER"
    SHOOT_STRAIGHT = "SHOOT_STRAIGHT"
    SHOOT_UP = "SHOOT_UP"
    SHOOT_DOWN = "SHOOT_DOWN"
    RELOAD = "RELOAD"
    NONE = "NONE"

    def __str__(self) -> str:
        return self.name

    @property
    def is_move(self) -> bool:
        return self in (ActionType.MOVE_UP, ActionType.MOVE_DOWN)

    @property
    def is_shoot(self) -> bool:
        return self in (ActionType.SHOOT_STRAIGHT, ActionType.SHOOT_UP, ActionType.SHOOT_DOWN)


class Trajectory(Enum):
    """
    Flight path of a shot, with the slot offset it applies.

    UP means towards slot 0, DOWN towards the last slot.
    """
    STRAIGHT = "straight"
    UP = "up"
    DOWN = "down"

    @property
    def offset(self) -> int:
        return {
            Trajectory.STRAIGHT: 0,
            Trajectory.UP: -1,
            Trajectory.DOWN: 1,
        }[self]

    def __str__(self) -> str:
        return self.value


class HitResult(Enum):
    """What a resolved shot ended up hitting."""
    PLAYER = "player"
    BARREL = "barrel"
    BULLET = "bullet"
    MISS = "miss"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# GAME FLOW
# ============================================================================

class Phase(Enum):
    """Room lifecycle phases."""
    LOBBY = "lobby"
    PLANNING = "planning"
    RESOLUTION = "resolution"
    ENDED = "ended"

    def __str__(self) -> str:
        return self.value


class Winner(Enum):
    """Possible game outcomes once a game has ended."""
    SHERIFFS = "sheriffs"
    OUTLAWS = "outlaws"
    DRAW = "draw"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# ACTION VALIDATION
# ============================================================================

@dataclass
class ActionValidation:
    """
    Structured result of validating an action.

    Attributes:
        valid: Whether the action is valid
        error_code: Machine-readable error code (None if valid)
        message: Human-readable message explaining the result

    Error codes:
        - "NOT_ASSIGNED": Player has no slot on a team
        - "PLAYER_DEAD": Player is not alive
        - "ALREADY_LOCKED": Player already locked an action this round
        - "NO_AMMO": Shoot action with an empty gun
        - "AMMO_FULL": Reload action with a full gun
    """
    valid: bool
    error_code: str | None = None
    message: str = ""

    @staticmethod
    def success(message: str = "") -> ActionValidation:
        """Create a validation success result."""
        return ActionValidation(valid=True, error_code=None, message=message)

    @staticmethod
    def fail(error_code: str, message: str) -> ActionValidation:
        """Create a validation failure result."""
        return ActionValidation(valid=False, error_code=error_code, message=message)
