"""
Standoff - a simultaneous-action lane shootout engine.

Usage:
    from standoff import GameState, GameConfig, Player, Team, ActionType, resolve

    state = GameState("ABCD", GameConfig(slots_per_side=3))
    state.players.append(Player(id="p1", name="Wyatt", team=Team.SHERIFFS, slot=1))
    state.players[0].action = ActionType.SHOOT_STRAIGHT
    new_state, events = resolve(state)
"""

from .core.types import (
    Team,
    ActionType,
    Trajectory,
    HitResult,
    Phase,
    Winner,
    UNASSIGNED,
)
from .entities import Player, Barrel, ShotEvent
from .world import GameConfig, GameState
from .mechanics import VictoryConditions, VictoryResult
from .resolver import ActionResolver, RoundReport, resolve

__all__ = [
    "Team",
    "ActionType",
    "Trajectory",
    "HitResult",
    "Phase",
    "Winner",
    "UNASSIGNED",
    "Player",
    "Barrel",
    "ShotEvent",
    "GameConfig",
    "GameState",
    "VictoryConditions",
    "VictoryResult",
    "ActionResolver",
    "RoundReport",
    "resolve",
]
