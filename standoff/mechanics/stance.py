"""
StanceResolver - cover and reload bookkeeping.

Cover is applied before shots are resolved, so a player who takes cover is
already protected against the shots of the same round.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List

from ..core.types import ActionType, MAX_AMMO

if TYPE_CHECKING:
    from ..world.state import GameState


class StanceResolver:
    """Stateless resolver for COVER and RELOAD."""

    def apply_cover(self, state: GameState) -> List[str]:
        """
        COVER sets covered; every other non-move action drops it.

        Moves are left alone here because a successful move has already
        cleared the flag and a blocked move keeps whatever cover it had.
        """
        logs: List[str] = []
        for player in state.get_active_players():
            if player.action == ActionType.COVER:
                player.covered = True
                logs.append(f"{player.label()} takes cover")
            elif not player.action.is_move:
                player.covered = False
        return logs

    def apply_reload(self, state: GameState) -> List[str]:
        logs: List[str] = []
        for player in state.get_active_players():
            if player.action == ActionType.RELOAD:
                player.ammo = min(MAX_AMMO, player.ammo + 1)
                logs.append(f"{player.label()} reloads to {player.ammo}")
        return logs
