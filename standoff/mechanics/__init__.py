"""
Mechanics module - Action resolution systems.

This module provides stateless resolvers for the phases of a round:
- MovementResolver: Resolves MOVE_UP / MOVE_DOWN
- StanceResolver: Applies COVER and RELOAD
- CombatResolver: Resolves shooting, bullet collisions and impacts
- VictoryConditions: Checks game ending conditions

All resolvers are stateless - they take a GameState and return results
without modifying their own state.
"""

from .movement import MovementResolver, MovementResult, MovementPhaseResult
from .stance import StanceResolver
from .combat import CombatResolver, CombatResolutionResult, PendingShot
from .victory import VictoryConditions, VictoryResult

__all__ = [
    "MovementResolver",
    "MovementResult",
    "MovementPhaseResult",
    "StanceResolver",
    "CombatResolver",
    "CombatResolutionResult",
    "PendingShot",
    "VictoryConditions",
    "VictoryResult",
]
