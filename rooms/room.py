"""
Room - the game phase state machine for one room.

    lobby --start_game--> planning --round timer--> resolution
    resolution --survivors on both teams, after a short delay--> planning
    resolution --a team wiped out--> ended --play_again--> lobby
    any --end_session--> closed

All commands and timer callbacks take the room's asyncio.Lock, so every
mutation of the room's GameState happens one at a time in arrival order.
Guards are checked before anything is touched; a refused command raises a
RoomError and leaves the state exactly as it was.
"""

from __future__ import annotations

import asyncio
import random
import time
from typing import Any, Callable, Dict, Optional

from standoff import ActionResolver, VictoryConditions
from standoff.core.types import Team, ActionType, Phase, UNASSIGNED
from standoff.core.actions import PendingAction
from standoff.core.validation import validate_lock
from standoff.entities import Player
from standoff.world import GameConfig, GameState
from infra.logger import RoomLogAdapter, get_logger
from infra.settings import DEFAULT_RESOLUTION_DELAY_MS

from .errors import GuardFailed, NotFound, RoomClosed
from .notifier import (
    Notifier,
    NullNotifier,
    GAME_STATE,
    ROUND_START,
    ROUND_END,
    GAME_ENDED,
    ACTION_LOCKED,
)
from .timers import RoundTimer


def _now_ms() -> int:
    return int(time.time() * 1000)


class Room:
    """
    One room and its game.

    Attributes:
        code: Room code
        host_id: Identity allowed to change config and end the session
        state: The room's GameState (owned exclusively by this object)
        closed: True once end_session() ran
    """

    def __init__(
        self,
        code: str,
        host_id: str,
        config: Optional[GameConfig] = None,
        *,
        notifier: Optional[Notifier] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], int] = _now_ms,
        resolution_delay_ms: int = DEFAULT_RESOLUTION_DELAY_MS,
        resolver: Optional[ActionResolver] = None,
    ):
        self.code = code
        self.host_id = host_id
        self.state = GameState(code, config)
        self.closed = False

        self._notifier: Notifier = notifier or NullNotifier()
        self._rng = rng or random.Random()
        self._clock = clock
        self._resolution_delay_ms = resolution_delay_ms
        self._resolver = resolver or ActionResolver()
        self._victory = VictoryConditions()

        self._lock = asyncio.Lock()
        self._timer = RoundTimer(self._lock, name=code)
        self.log = RoomLogAdapter(get_logger(__name__), code)

    # ------------------------------------------------------------------#
    # Queries
    # ------------------------------------------------------------------#
    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def timer_pending(self) -> bool:
        return self._timer.pending

    def snapshot(self) -> Dict[str, Any]:
        return self.state.to_dict()

    def is_host(self, participant_id: str) -> bool:
        return participant_id == self.host_id

    # ------------------------------------------------------------------#
    # Lobby commands
    # ------------------------------------------------------------------#
    async def join(self, player_id: str, name: str) -> Player:
        """
        Add a player, or reconnect one that is already in the room.

        New players are only accepted in the lobby. They are placed on the
        team with fewer assigned players (sheriffs on a tie) at its first
        free slot, or left unassigned if that team is full.
        """
        async with self._lock:
            self._ensure_open()
            existing = self.state.get_player(player_id)
            if existing is not None:
                if name:
                    existing.name = name
                self.log.info("%s reconnected", existing.label())
                await self._broadcast_state()
                return existing

            if self.state.phase != Phase.LOBBY:
                raise GuardFailed("Game already in progress", "GAME_IN_PROGRESS")

            sheriffs = len(self.state.get_team_players(Team.SHERIFFS))
            outlaws = len(self.state.get_team_players(Team.OUTLAWS))
            team = Team.SHERIFFS if sheriffs <= outlaws else Team.OUTLAWS

            player = Player(id=player_id, name=name, team=team)
            slot = self.state.free_slot(team)
            if slot is not None:
                player.slot = slot
            self.state.players.append(player)

            self.log.info("%s joined", player.label())
            await self._broadcast_state()
            return player

    async def select_team(self, player_id: str, team: Team) -> Player:
        async with self._lock:
            self._ensure_open()
            self._require_phase(Phase.LOBBY, "Teams can only be changed in the lobby")
            player = self._require_player(player_id)

            slot = self.state.free_slot(team, exclude_id=player.id)
            if slot is None:
                raise GuardFailed("Team is full", "TEAM_FULL")

            player.team = team
            player.slot = slot

            self.log.info("%s selected team", player.label())
            await self._broadcast_state()
            return player

    async def leave_team(self, player_id: str) -> Player:
        async with self._lock:
            self._ensure_open()
            self._require_phase(Phase.LOBBY, "Teams can only be changed in the lobby")
            player = self._require_player(player_id)
            player.slot = UNASSIGNED

            self.log.info("%s left their team", player.name)
            await self._broadcast_state()
            return player

    async def update_config(
        self,
        host_id: str,
        tick_duration: Optional[int] = None,
        slots_per_side: Optional[int] = None,
    ) -> GameConfig:
        """
        Host-only, lobby-only config change. Values are clamped to bounds.

        Changing slots_per_side rebuilds every barrel and takes players off
        lanes that no longer exist.
        """
        async with self._lock:
            self._ensure_open()
            if not self.is_host(host_id):
                raise GuardFailed("Only the host can change settings", "NOT_HOST")
            self._require_phase(Phase.LOBBY, "Settings can only be changed in the lobby")

            config = self.state.config.merged(
                tick_duration=tick_duration,
                slots_per_side=slots_per_side,
            )
            self.state.config = config
            if slots_per_side is not None:
                self.state.rebuild_barrels()
                for player in self.state.players:
                    if player.is_assigned and not config.in_range(player.slot):
                        player.slot = UNASSIGNED

            self.log.info("config updated: %s", config.to_dict())
            await self._broadcast_state()
            return config

    async def resume_host(self, host_id: str) -> Dict[str, Any]:
        async with self._lock:
            self._ensure_open()
            if not self.is_host(host_id):
                raise GuardFailed("Invalid host", "NOT_HOST")
            self.log.info("host resumed")
            return self.snapshot()

    # ------------------------------------------------------------------#
    # Game flow
    # ------------------------------------------------------------------#
    async def start_game(self) -> None:
        """
        Leave the lobby: reset combatants, shuffle slots per team, open round 1.
        """
        async with self._lock:
            self._ensure_open()
            self._require_phase(Phase.LOBBY, "Game already started")

            sheriffs = self.state.get_team_players(Team.SHERIFFS)
            outlaws = self.state.get_team_players(Team.OUTLAWS)
            if not sheriffs or not outlaws:
                raise GuardFailed("Both teams need at least one player", "TEAMS_INCOMPLETE")
            limit = self.state.config.slots_per_side
            if len(sheriffs) > limit or len(outlaws) > limit:
                raise GuardFailed("Too many players for available slots", "TOO_MANY_PLAYERS")

            for player in sheriffs + outlaws:
                player.reset_combat()
            self.state.repair_barrels()
            self.state.round = 0
            self.state.winner = None
            self.state.last_events = []

            for team_players in (sheriffs, outlaws):
                # random.shuffle is a Fisher-Yates shuffle
                self._rng.shuffle(team_players)
                for slot, player in enumerate(team_players):
                    player.slot = slot

            self.log.info("game started: %d sheriffs vs %d outlaws", len(sheriffs), len(outlaws))
            await self._enter_planning()

    async def lock_action(self, player_id: str, action: ActionType) -> Player:
        async with self._lock:
            self._ensure_open()
            self._require_phase(Phase.PLANNING, "Actions can only be locked during planning")
            player = self._require_player(player_id)

            validation = validate_lock(player, action)
            if not validation.valid:
                raise GuardFailed(validation.message, validation.error_code)

            player.locked = True
            player.action = action
            self.state.pending_actions.append(PendingAction(player_id=player.id, action=action))

            self.log.debug("%s locked %s", player.label(), action.name)
            await self._notifier.publish(self.code, ACTION_LOCKED, {"player_id": player.id})
            await self._broadcast_state()
            return player

    async def play_again(self) -> None:
        """
        Back to the lobby, keeping teams and slots.

        Also aborts a game that is still running.
        """
        async with self._lock:
            self._ensure_open()
            if self.state.phase == Phase.LOBBY:
                raise GuardFailed("Already in the lobby", "ALREADY_IN_LOBBY")

            self._timer.cancel()
            self.state.phase = Phase.LOBBY
            self.state.round = 0
            self.state.winner = None
            self.state.pending_actions = []
            self.state.last_events = []
            self.state.round_started_at = None
            for player in self.state.players:
                player.reset_combat()
            self.state.repair_barrels()

            self.log.info("back to lobby")
            await self._broadcast_state()

    async def end_session(self) -> None:
        async with self._lock:
            if self.closed:
                return
            self._timer.cancel()
            self.closed = True
            self.log.info("session ended")

    # ------------------------------------------------------------------#
    # Transitions (lock held)
    # ------------------------------------------------------------------#
    async def _enter_planning(self) -> None:
        state = self.state
        state.phase = Phase.PLANNING
        state.round += 1
        state.pending_actions = []
        state.round_started_at = self._clock()
        for player in state.players:
            player.clear_intent()

        duration = state.config.tick_duration
        self.log.info("round %d planning (%d ms)", state.round, duration)

        await self._notifier.publish(self.code, ROUND_START, {
            "round": state.round,
            "duration_ms": duration,
            "started_at": state.round_started_at,
        })
        await self._broadcast_state()

        self._timer.schedule(
            duration,
            guard=lambda: not self.closed and self.state.phase == Phase.PLANNING,
            callback=self._resolve_round,
        )

    async def _resolve_round(self) -> None:
        self.state.phase = Phase.RESOLUTION

        report = self._resolver.resolve_detailed(self.state)
        self.state = report.state
        self.state.last_events = list(report.events)
        for line in report.logs:
            self.log.debug(line)
        self.log.info("round %d resolved: %d shots", self.state.round, len(report.events))

        await self._notifier.publish(self.code, ROUND_END, {
            "round": self.state.round,
            "events": [e.to_dict() for e in report.events],
            "state": self.snapshot(),
        })

        result = self._victory.check(self.state)
        if result.is_game_over:
            self.state.winner = result.winner
            self.state.phase = Phase.ENDED
            self.log.info("game over: %s", result)
            await self._notifier.publish(self.code, GAME_ENDED, {"winner": result.winner.value})
            await self._broadcast_state()
            return

        self._timer.schedule(
            self._resolution_delay_ms,
            guard=lambda: not self.closed and self.state.phase == Phase.RESOLUTION,
            callback=self._enter_planning,
        )

    # ------------------------------------------------------------------#
    # Helpers
    # ------------------------------------------------------------------#
    async def _broadcast_state(self) -> None:
        await self._notifier.publish(self.code, GAME_STATE, self.snapshot())

    def _ensure_open(self) -> None:
        if self.closed:
            raise RoomClosed(f"Room {self.code} has been closed")

    def _require_phase(self, phase: Phase, message: str) -> None:
        if self.state.phase != phase:
            raise GuardFailed(message, "WRONG_PHASE")

    def _require_player(self, player_id: str) -> Player:
        player = self.state.get_player(player_id)
        if player is None:
            raise NotFound("Player not found", "PLAYER_NOT_FOUND")
        return player

    def __repr__(self) -> str:
        return f"Room(code={self.code!r}, phase={self.state.phase}, players={len(self.state.players)})"
