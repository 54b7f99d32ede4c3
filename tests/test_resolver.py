import random

from standoff import ActionType, GameState, Team, resolve
from standoff.resolver import ActionResolver

from builders import build_state, sheriff, outlaw


def _busy_state() -> GameState:
    return build_state(
        sheriff(0, ActionType.SHOOT_DOWN, ammo=2),
        sheriff(1, ActionType.MOVE_DOWN),
        sheriff(2, ActionType.COVER),
        outlaw(0, ActionType.RELOAD),
        outlaw(1, ActionType.SHOOT_UP, ammo=1),
        outlaw(2, ActionType.SHOOT_STRAIGHT, ammo=3),
        slots=4,
    )


def test_input_state_is_never_mutated():
    state = _busy_state()
    before = state.to_dict()

    new_state, events = resolve(state)

    assert state.to_dict() == before
    assert new_state is not state
    assert events


def test_resolving_identical_copies_gives_identical_results():
    state = _busy_state()
    a, b = state.clone(), state.clone()

    state_a, events_a = resolve(a)
    state_b, events_b = resolve(b)

    assert state_a.to_dict() == state_b.to_dict()
    assert events_a == events_b


def test_shot_ids_continue_across_rounds():
    state = build_state(
        sheriff(0, ActionType.SHOOT_STRAIGHT, ammo=3),
        outlaw(1, ActionType.SHOOT_STRAIGHT, ammo=3),
    )

    first, first_events = resolve(state)
    second, second_events = resolve(first)

    ids = [e.id for e in first_events + second_events]
    assert ids == ["bullet-1", "bullet-2", "bullet-3", "bullet-4"]
    assert second.shot_counter == 4


def test_detailed_report_carries_movement_and_kills():
    s = sheriff(0, ActionType.SHOOT_STRAIGHT, ammo=1)
    o = outlaw(0, hp=1)
    mover = sheriff(1, ActionType.MOVE_DOWN)
    state = build_state(s, o, mover)

    report = ActionResolver().resolve_detailed(state)

    assert report.killed == [o.id]
    assert [r.player_id for r in report.movement.movement_results] == [mover.id]
    assert any("is down" in line for line in report.logs)


def test_living_players_never_increase_over_many_rounds():
    rng = random.Random(7)
    actions = list(ActionType)
    state = build_state(
        sheriff(0, ammo=2), sheriff(1, ammo=1), sheriff(3, ammo=3),
        outlaw(0, ammo=1), outlaw(2, ammo=2), outlaw(3, ammo=0),
        slots=4,
    )

    for _ in range(40):
        for player in state.players:
            player.action = rng.choice(actions)
        alive_before = {team: state.count_alive(team) for team in Team}

        state, _ = resolve(state)

        for team in Team:
            assert state.count_alive(team) <= alive_before[team]
        for team in Team:
            slots = [p.slot for p in state.players if p.team == team and p.is_active]
            assert len(slots) == len(set(slots))
        for player in state.players:
            assert 0 <= player.hp <= 3
            assert 0 <= player.ammo <= 3
        for barrel in state.barrels:
            assert 0 <= barrel.hp <= 3
