"""
MovementResolver - Movement action resolution.

This module handles:
- Computing move targets
- Dropping moves that would leave the lanes
- First-come-first-served slot reservation
- Applying slot changes (moving always breaks cover)
- Generating movement logs
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Set, Tuple
from dataclasses import dataclass

from ..core.types import Team
from ..core.actions import move_target

if TYPE_CHECKING:
    from ..world.state import GameState
    from ..entities.player import Player


@dataclass
class MovementResult:
    """
    Result of resolving a single movement action.

    Attributes:
        player_id: ID of player that moved (or tried to)
        success: Whether movement succeeded
        old_slot: Slot before movement
        new_slot: Slot after movement (same as old if failed)
        failure_reason: Optional machine-readable reason code when movement fails
    """
    player_id: str
    success: bool
    old_slot: int
    new_slot: int
    failure_reason: str | None


@dataclass
class MovementPhaseResult:
    """
    Complete result of the movement phase.

    Attributes:
        movement_results: One result per move attempt, in player list order
        logs: Human-readable log lines in execution order
    """
    movement_results: List[MovementResult]
    logs: List[str]

    @property
    def movement_occurred(self) -> bool:
        return any(result.success for result in self.movement_results)


class MovementResolver:
    """
    Stateless resolver for MOVE_UP / MOVE_DOWN.

    Occupancy is tracked per (team, slot):
    1. Every active player who is not moving reserves their current slot.
    2. Move attempts are granted in player list order; a mover takes the
       target slot if nobody has reserved it yet, otherwise stays put.
    3. A mover who stays put still stands on their old slot. Any granted
       move into that slot is revoked, and revocations cascade until no
       two players of a team share a slot.

    Nothing is written to the players until the plan has settled.
    """

    def resolve(self, state: GameState) -> MovementPhaseResult:
        """
        Resolve all movement for a round.

        Args:
            state: Round state (modified in-place)

        Returns:
            MovementPhaseResult with all outcomes
        """
        slots = state.config.slots_per_side
        attempts: List[Tuple[Player, int]] = []
        failures: Dict[str, str] = {}
        logs: List[str] = []

        for player in state.get_active_players():
            target = move_target(player.slot, player.action)
            if target is None:
                continue
            if not 0 <= target < slots:
                failures[player.id] = "OUT_OF_BOUNDS"
                logs.append(f"{player.label()} cannot move {player.action.name} (out of bounds)")
                continue
            attempts.append((player, target))

        movers = {player.id for player, _ in attempts}
        reserved: Set[Tuple[Team, int]] = {
            (p.team, p.slot) for p in state.get_active_players() if p.id not in movers
        }

        # First come, first served
        granted: Dict[str, int] = {}
        for player, target in attempts:
            key = (player.team, target)
            if key in reserved:
                failures[player.id] = "COLLISION"
                logs.append(f"{player.label()} blocked at slot {target}")
                continue
            reserved.add(key)
            granted[player.id] = target

        self._settle(attempts, granted, failures, logs)

        results: List[MovementResult] = []
        for player in state.get_active_players():
            if player.id in granted:
                old_slot = player.slot
                player.slot = granted[player.id]
                player.covered = False
                results.append(MovementResult(
                    player_id=player.id,
                    success=True,
                    old_slot=old_slot,
                    new_slot=player.slot,
                    failure_reason=None,
                ))
                logs.append(f"{player.team.value} {player.name} moves from slot {old_slot} to {player.slot}")
            elif player.id in failures:
                results.append(MovementResult(
                    player_id=player.id,
                    success=False,
                    old_slot=player.slot,
                    new_slot=player.slot,
                    failure_reason=failures[player.id],
                ))

        return MovementPhaseResult(movement_results=results, logs=logs)

    def _settle(
        self,
        attempts: List[Tuple[Player, int]],
        granted: Dict[str, int],
        failures: Dict[str, str],
        logs: List[str],
    ) -> None:
        """Revoke granted moves that land on a slot a blocked mover still holds."""
        changed = True
        while changed:
            changed = False
            held = {
                (player.team, player.slot)
                for player, _ in attempts
                if player.id not in granted
            }
            for player, target in attempts:
                if player.id in granted and (player.team, target) in held:
                    del granted[player.id]
                    failures[player.id] = "COLLISION"
                    logs.append(f"{player.label()} blocked at slot {target}")
                    changed = True
