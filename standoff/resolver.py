"""
ActionResolver - the per-round state transition.

This is the primary API of the Standoff engine:

    from standoff import resolve

    new_state, events = resolve(state)

`resolve` never touches its argument. It clones the state, runs the round
on the clone and returns it along with the ShotEvents for animation.

Round order:
    1. Movement (first come, first served in player list order)
    2. Cover
    3. Reload
    4. Shooting (ammo spent, shots registered)
    5. Bullet-vs-bullet collisions
    6. Impacts on barrels and players

Every phase walks living, slot-assigned players in player list order, so
the list order is the only tie-break.
"""

from __future__ import annotations
from typing import List, Tuple
from dataclasses import dataclass, field

from .entities.shot import ShotEvent
from .world.state import GameState
from .utils.id_generator import IDGenerator
from .mechanics import (
    MovementResolver,
    StanceResolver,
    CombatResolver,
    MovementPhaseResult,
)


@dataclass
class RoundReport:
    """
    Everything one resolution produced.

    Attributes:
        state: The new state (owned by the caller, never the input object)
        events: ShotEvents in resolution order
        movement: Outcome of each move attempt
        killed: IDs of players who died this round
        logs: Human-readable narration in execution order
    """
    state: GameState
    events: List[ShotEvent]
    movement: MovementPhaseResult
    killed: List[str] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)


class ActionResolver:
    """
    Orchestrates the mechanics resolvers for a single round.

    The resolver holds no game state; the sub-resolvers are stateless and
    reused across calls.
    """

    def __init__(self):
        self._movement = MovementResolver()
        self._stance = StanceResolver()
        self._combat = CombatResolver()

    def resolve(self, state: GameState) -> Tuple[GameState, List[ShotEvent]]:
        """
        Resolve the round described by `state`.

        Args:
            state: State with every player's action already set

        Returns:
            Tuple of (new_state, events)
        """
        report = self.resolve_detailed(state)
        return report.state, report.events

    def resolve_detailed(self, state: GameState) -> RoundReport:
        """Same as resolve() but keeps the movement results and narration."""
        new_state = state.clone()
        ids = IDGenerator.after(new_state.shot_counter)
        logs: List[str] = []

        movement = self._movement.resolve(new_state)
        logs.extend(movement.logs)

        logs.extend(self._stance.apply_cover(new_state))
        logs.extend(self._stance.apply_reload(new_state))

        combat = self._combat.resolve_combat(new_state, ids)
        logs.extend(combat.logs)

        new_state.shot_counter = ids.last

        return RoundReport(
            state=new_state,
            events=combat.events,
            movement=movement,
            killed=combat.killed,
            logs=logs,
        )


_default_resolver = ActionResolver()


def resolve(state: GameState) -> Tuple[GameState, List[ShotEvent]]:
    """Resolve one round with the module-level resolver."""
    return _default_resolver.resolve(state)
