"""
CombatResolver - Shooting, bullet collision and impact resolution.

This module handles:
- Turning shoot actions into pending shots (ammo is spent here)
- Cancelling shots that are aimed at each other's origin
- Applying the remaining shots to barrels and players
- Producing ShotEvents in resolution order
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List, Set, Tuple
from dataclasses import dataclass

from ..core.types import Team, Trajectory, HitResult
from ..core.actions import shot_target, shot_trajectory
from ..entities.shot import ShotEvent
from ..utils.id_generator import IDGenerator

if TYPE_CHECKING:
    from ..world.state import GameState
    from ..entities.player import Player


@dataclass
class PendingShot:
    """
    A shot that has been fired but not yet resolved.

    Attributes:
        id: Shot id minted when the shot was registered
        shooter: The player who fired
        from_slot: Shooter's slot when firing
        target_slot: Opposing slot the shot is aimed at
        trajectory: Straight, up or down
    """
    id: str
    shooter: Player
    from_slot: int
    target_slot: int
    trajectory: Trajectory

    @property
    def team(self) -> Team:
        return self.shooter.team

    def to_event(self, hit: HitResult) -> ShotEvent:
        return ShotEvent(
            id=self.id,
            from_team=self.team,
            from_slot=self.from_slot,
            to_slot=self.target_slot,
            trajectory=self.trajectory,
            hit=hit,
        )


@dataclass
class CombatResolutionResult:
    """
    Complete result of the combat phases for a round.

    Attributes:
        events: ShotEvents in resolution order (collisions first, then impacts)
        logs: Human-readable log lines
        killed: IDs of players who died this round
    """
    events: List[ShotEvent]
    logs: List[str]
    killed: List[str]


class CombatResolver:
    """
    Stateless resolver for shooting.

    All methods take the round state explicitly; the id generator is passed
    in by the caller so that shot ids continue the room's sequence.
    """

    def resolve_combat(self, state: GameState, ids: IDGenerator) -> CombatResolutionResult:
        """
        Run shooting, bullet collision and impact for a round.

        Args:
            state: Round state (modified in-place)
            ids: Generator for fresh shot ids

        Returns:
            CombatResolutionResult with the round's events
        """
        logs: List[str] = []
        shots = self.collect_shots(state, ids)

        events, remaining = self.resolve_collisions(shots)
        for event in events:
            logs.append(f"{event.id} from {event.from_team}#{event.from_slot} meets a bullet mid-air")

        impact_events, killed = self.resolve_impacts(state, remaining, logs)
        events.extend(impact_events)

        return CombatResolutionResult(events=events, logs=logs, killed=killed)

    def collect_shots(self, state: GameState, ids: IDGenerator) -> List[PendingShot]:
        """
        Register a pending shot for every loaded player with a shoot action.

        Out-of-range targets produce no shot and keep the ammo.
        """
        shots: List[PendingShot] = []
        for player in state.get_active_players():
            if player.ammo <= 0:
                continue
            target = shot_target(player.slot, player.action)
            if target is None or not state.config.in_range(target):
                continue
            player.ammo -= 1
            shots.append(PendingShot(
                id=ids.next_id(),
                shooter=player,
                from_slot=player.slot,
                target_slot=target,
                trajectory=shot_trajectory(player.action),
            ))
        return shots

    def resolve_collisions(
        self,
        shots: List[PendingShot],
    ) -> Tuple[List[ShotEvent], List[PendingShot]]:
        """
        Cancel pairs of opposing shots aimed at each other's origin slot.

        Sheriff shots are walked in registration order and each one takes
        the first still-unpaired outlaw shot that matches. The scan is
        quadratic in the number of shots, which is fine at lane counts.

        Returns:
            (hit-bullet events, shots left for impact resolution)
        """
        sheriff_shots = [s for s in shots if s.team == Team.SHERIFFS]
        outlaw_shots = [s for s in shots if s.team == Team.OUTLAWS]

        events: List[ShotEvent] = []
        collided: Set[str] = set()

        for s_shot in sheriff_shots:
            for o_shot in outlaw_shots:
                if o_shot.id in collided:
                    continue
                if s_shot.from_slot == o_shot.target_slot and o_shot.from_slot == s_shot.target_slot:
                    collided.add(s_shot.id)
                    collided.add(o_shot.id)
                    events.append(s_shot.to_event(HitResult.BULLET))
                    events.append(o_shot.to_event(HitResult.BULLET))
                    break

        remaining = [s for s in shots if s.id not in collided]
        return events, remaining

    def resolve_impacts(
        self,
        state: GameState,
        shots: List[PendingShot],
        logs: List[str],
    ) -> Tuple[List[ShotEvent], List[str]]:
        """
        Apply each surviving shot to the opposing lane.

        A covered target behind an intact barrel loses barrel hp instead of
        player hp. A target killed earlier in this loop is no longer there.

        Returns:
            (impact events, ids of players killed)
        """
        events: List[ShotEvent] = []
        killed: List[str] = []

        for shot in shots:
            target_team = shot.team.opponent
            target = state.player_at(target_team, shot.target_slot)

            if target is None:
                events.append(shot.to_event(HitResult.MISS))
                logs.append(f"{shot.id} from {shot.shooter.label()} misses slot {shot.target_slot}")
                continue

            barrel = state.get_barrel(target_team, shot.target_slot)
            if target.covered and barrel is not None and barrel.intact:
                barrel.absorb_hit()
                events.append(shot.to_event(HitResult.BARREL))
                logs.append(f"{shot.id} hits the barrel covering {target.label()} (barrel hp {barrel.hp})")
                continue

            target.take_hit()
            events.append(shot.to_event(HitResult.PLAYER))
            logs.append(f"{shot.id} hits {target.label()} (hp {target.hp})")
            if not target.alive:
                killed.append(target.id)
                logs.append(f"{target.label()} is down")

        return events, killed
