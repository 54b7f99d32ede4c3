import asyncio
import random

from standoff import ActionType, GameConfig, Phase, Winner
from rooms import RecordingNotifier, Room, RoundTimer

TICK_MS = 30
DELAY_MS = 10


async def _wait_for(predicate, timeout: float = 2.0) -> bool:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            return False
        await asyncio.sleep(0.005)
    return True


def _fast_room(notifier: RecordingNotifier) -> Room:
    return Room(
        "FAST",
        "host",
        GameConfig(tick_duration=TICK_MS, slots_per_side=2),
        notifier=notifier,
        rng=random.Random(1),
        resolution_delay_ms=DELAY_MS,
    )


# ---------------------------------------------------------------------------
# Room rounds
# ---------------------------------------------------------------------------

def test_round_resolves_and_game_ends():
    async def scenario():
        notifier = RecordingNotifier()
        room = _fast_room(notifier)
        await room.join("s", "Sam")
        await room.join("o", "Olive")
        await room.start_game()
        room.state.get_player("o").hp = 1
        await room.lock_action("s", ActionType.SHOOT_STRAIGHT)
        ended = await _wait_for(lambda: room.phase == Phase.ENDED)
        return room, notifier, ended

    room, notifier, ended = asyncio.run(scenario())

    assert ended
    assert room.state.winner == Winner.SHERIFFS
    assert not room.timer_pending
    round_end = notifier.of_type("round_end")
    assert len(round_end) == 1
    assert [e["hit"] for e in round_end[0]["events"]] == ["player"]
    assert notifier.of_type("game_ended") == [{"winner": "sheriffs"}]
    names = notifier.names()
    assert names.index("round_end") < names.index("game_ended")


def test_survivors_on_both_sides_start_another_round():
    async def scenario():
        notifier = RecordingNotifier()
        room = _fast_room(notifier)
        await room.join("s", "Sam")
        await room.join("o", "Olive")
        await room.start_game()
        await room.lock_action("s", ActionType.RELOAD)
        reached = await _wait_for(lambda: room.state.round == 2 and room.phase == Phase.PLANNING)
        state = room.state
        await room.end_session()
        return state, notifier, reached

    state, notifier, reached = asyncio.run(scenario())

    assert reached
    assert state.get_player("s").ammo == 2
    assert not state.get_player("s").locked
    assert state.pending_actions == []
    assert [p["round"] for p in notifier.of_type("round_start")][:2] == [1, 2]


def test_play_again_during_planning_stops_the_round():
    async def scenario():
        notifier = RecordingNotifier()
        room = _fast_room(notifier)
        await room.join("s", "Sam")
        await room.join("o", "Olive")
        await room.start_game()
        await room.play_again()
        await asyncio.sleep(TICK_MS * 3 / 1000)
        return room, notifier

    room, notifier = asyncio.run(scenario())

    assert room.phase == Phase.LOBBY
    assert notifier.of_type("round_end") == []


def test_end_session_stops_the_round():
    async def scenario():
        notifier = RecordingNotifier()
        room = _fast_room(notifier)
        await room.join("s", "Sam")
        await room.join("o", "Olive")
        await room.start_game()
        await room.end_session()
        await asyncio.sleep(TICK_MS * 3 / 1000)
        return room, notifier

    room, notifier = asyncio.run(scenario())

    assert room.closed
    assert room.phase == Phase.PLANNING
    assert notifier.of_type("round_end") == []


# ---------------------------------------------------------------------------
# RoundTimer
# ---------------------------------------------------------------------------

def test_timer_fires_once():
    async def scenario():
        timer = RoundTimer(asyncio.Lock())
        fired = []

        async def callback():
            fired.append(1)

        timer.schedule(5, lambda: True, callback)
        await asyncio.sleep(0.05)
        return fired, timer.pending

    fired, pending = asyncio.run(scenario())

    assert fired == [1]
    assert not pending


def test_rescheduling_replaces_the_pending_timer():
    async def scenario():
        timer = RoundTimer(asyncio.Lock())
        fired = []

        async def first():
            fired.append("first")

        async def second():
            fired.append("second")

        timer.schedule(5, lambda: True, first)
        timer.schedule(5, lambda: True, second)
        await asyncio.sleep(0.05)
        return fired

    assert asyncio.run(scenario()) == ["second"]


def test_timer_waiting_on_the_lock_is_dropped_after_cancel():
    async def scenario():
        lock = asyncio.Lock()
        timer = RoundTimer(lock)
        fired = []

        async def callback():
            fired.append(1)

        async with lock:
            timer.schedule(1, lambda: True, callback)
            # let the timer wake up and block on the lock
            await asyncio.sleep(0.02)
            timer.generation += 1
        await asyncio.sleep(0.02)
        return fired

    assert asyncio.run(scenario()) == []


def test_failed_guard_skips_the_callback():
    async def scenario():
        timer = RoundTimer(asyncio.Lock())
        fired = []

        async def callback():
            fired.append(1)

        timer.schedule(1, lambda: False, callback)
        await asyncio.sleep(0.02)
        return fired

    assert asyncio.run(scenario()) == []


def test_callback_can_schedule_the_next_timer():
    async def scenario():
        timer = RoundTimer(asyncio.Lock())
        fired = []

        async def second():
            fired.append("second")

        async def first():
            fired.append("first")
            timer.schedule(1, lambda: True, second)

        timer.schedule(1, lambda: True, first)
        await asyncio.sleep(0.05)
        return fired

    assert asyncio.run(scenario()) == ["first", "second"]


def test_callback_errors_are_contained():
    async def scenario():
        timer = RoundTimer(asyncio.Lock(), name="boom")

        async def callback():
            raise RuntimeError("boom")

        timer.schedule(1, lambda: True, callback)
        await asyncio.sleep(0.02)
        return timer.pending

    assert asyncio.run(scenario()) is False
