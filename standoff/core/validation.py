"""
Lock-in validation.

Checks that only depend on the player; phase checks belong to the room.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from .types import ActionValidation, ActionType, MAX_AMMO

if TYPE_CHECKING:
    from ..entities.player import Player


def validate_lock(player: Player, action: ActionType) -> ActionValidation:
    """
    Check whether `player` may lock `action` for the current round.

    Phase checks are the room's business; this only looks at the player.
    """
    if not player.is_assigned:
        return ActionValidation.fail(
            "NOT_ASSIGNED",
            f"{player.label()} is not on a team"
        )

    if not player.alive:
        return ActionValidation.fail(
            "PLAYER_DEAD",
            f"{player.label()} is dead"
        )

    if player.locked:
        return ActionValidation.fail(
            "ALREADY_LOCKED",
            f"{player.label()} already locked an action this round"
        )

    if action.is_shoot and player.ammo <= 0:
        return ActionValidation.fail(
            "NO_AMMO",
            f"{player.label()} has no ammo"
        )

    if action == ActionType.RELOAD and player.ammo >= MAX_AMMO:
        return ActionValidation.fail(
            "AMMO_FULL",
            f"{player.label()} is already fully loaded"
        )

    return ActionValidation.success()
