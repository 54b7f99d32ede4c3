"""
Victory condition checking for the Standoff engine.

A game ends when at least one team has no living, slot-assigned players:
- Both teams wiped out: draw
- One team wiped out: the other team wins
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..core.types import Team, Winner

if TYPE_CHECKING:
    from ..world.state import GameState


@dataclass
class VictoryResult:
    """
    Result of a victory condition check.

    Attributes:
        winner: Outcome, or None while the game is still in progress
        sheriffs_alive: Living slot-assigned sheriffs
        outlaws_alive: Living slot-assigned outlaws
    """
    winner: Optional[Winner]
    sheriffs_alive: int
    outlaws_alive: int

    @property
    def is_game_over(self) -> bool:
        """Check if the game has ended."""
        return self.winner is not None

    def __str__(self) -> str:
        if self.winner is None:
            return f"Game in progress ({self.sheriffs_alive} vs {self.outlaws_alive})"
        if self.winner == Winner.DRAW:
            return "Draw: nobody left standing"
        return f"{self.winner.value.title()} win"


class VictoryConditions:
    """
    Stateless checker for game end conditions.

    Usage:
        result = VictoryConditions().check(state)
        if result.is_game_over:
            print(f"Game Over: {result}")
    """

    def check(self, state: GameState) -> VictoryResult:
        sheriffs_alive = state.count_alive(Team.SHERIFFS)
        outlaws_alive = state.count_alive(Team.OUTLAWS)

        winner: Optional[Winner] = None
        if sheriffs_alive == 0 and outlaws_alive == 0:
            winner = Winner.DRAW
        elif sheriffs_alive == 0:
            winner = Winner.OUTLAWS
        elif outlaws_alive == 0:
            winner = Winner.SHERIFFS

        return VictoryResult(
            winner=winner,
            sheriffs_alive=sheriffs_alive,
            outlaws_alive=outlaws_alive,
        )
