import asyncio
import random

import pytest

from standoff import GameConfig, Team
from rooms import GuardFailed, NotFound, RoomRegistry, RoomService
from rooms.registry import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH


def _service() -> RoomService:
    return RoomService(RoomRegistry(rng=random.Random(11)))


def test_room_codes_use_the_unambiguous_alphabet():
    registry = RoomRegistry(rng=random.Random(5))

    codes = [registry.create(f"host-{i}").code for i in range(30)]

    assert len(set(codes)) == 30
    for code in codes:
        assert len(code) == ROOM_CODE_LENGTH
        assert set(code) <= set(ROOM_CODE_ALPHABET)
        assert "I" not in code and "O" not in code
    assert len(registry) == 30


def test_host_is_routed_to_its_new_room():
    registry = RoomRegistry(rng=random.Random(5))

    room = registry.create("host")

    assert registry.room_code_for("host") == room.code
    assert registry.room_for("host") is room
    assert registry.get(room.code) is room


def test_destroy_drops_every_participant_of_that_room():
    registry = RoomRegistry(rng=random.Random(5))
    kept = registry.create("h1")
    gone = registry.create("h2")
    registry.bind("p1", gone.code)
    registry.bind("p2", kept.code)

    assert registry.destroy(gone.code) is gone
    assert registry.destroy(gone.code) is None

    assert len(registry) == 1
    assert registry.get(kept.code) is kept
    assert registry.room_code_for("p1") is None
    assert registry.room_code_for("h2") is None
    assert registry.room_code_for("p2") == kept.code


def test_service_clamps_client_config():
    async def scenario():
        service = _service()
        return await service.create_room("host", GameConfig(tick_duration=50, slots_per_side=30))

    room = asyncio.run(scenario())

    assert room.state.config.tick_duration == 1000
    assert room.state.config.slots_per_side == 8


def test_service_routes_player_commands_by_identity():
    async def scenario():
        service = _service()
        room = await service.create_room("host")
        await service.join(room.code.lower(), "p1", "Pat")
        await service.join(room.code, "p2", "Kim")
        moved = await service.select_team("p1", Team.OUTLAWS)
        return service, room, moved

    service, room, moved = asyncio.run(scenario())

    assert moved.team == Team.OUTLAWS
    assert service.room_code_for("p1") == room.code
    assert [p["id"] for p in service.get_state(room.code)["players"]] == ["p1", "p2"]


def test_unknown_room_and_unrouted_player():
    async def scenario():
        service = _service()
        with pytest.raises(NotFound) as missing_room:
            await service.join("ZZZZ", "p1", "Pat")
        with pytest.raises(NotFound) as missing_player:
            await service.leave_team("nobody")
        return missing_room.value, missing_player.value

    missing_room, missing_player = asyncio.run(scenario())

    assert missing_room.code == "ROOM_NOT_FOUND"
    assert missing_player.code == "NOT_IN_ROOM"


def test_disconnect_keeps_the_player_record():
    async def scenario():
        service = _service()
        room = await service.create_room("host")
        await service.join(room.code, "p1", "Pat")
        service.disconnect("p1")
        routed_after_disconnect = service.room_code_for("p1")
        await service.join(room.code, "p1", "Pat")
        return service, room, routed_after_disconnect

    service, room, routed_after_disconnect = asyncio.run(scenario())

    assert routed_after_disconnect is None
    assert service.room_code_for("p1") == room.code
    assert len(room.state.players) == 1


def test_end_session_is_host_only_and_forgets_the_room():
    async def scenario():
        service = _service()
        room = await service.create_room("host")
        await service.join(room.code, "p1", "Pat")
        with pytest.raises(GuardFailed):
            await service.end_session(room.code, "p1")
        await service.end_session(room.code, "host")
        return service, room

    service, room = asyncio.run(scenario())

    assert room.closed
    assert service.registry.get(room.code) is None
    assert service.room_code_for("p1") is None
    with pytest.raises(NotFound):
        service.get_state(room.code)


def test_resume_host_rebinds_the_host():
    async def scenario():
        service = _service()
        room = await service.create_room("host")
        service.disconnect("host")
        snapshot = await service.resume_host(room.code, "host")
        return service, room, snapshot

    service, room, snapshot = asyncio.run(scenario())

    assert snapshot["room_code"] == room.code
    assert service.room_code_for("host") == room.code


def test_unbind_with_a_stale_code_leaves_the_entry_alone():
    registry = RoomRegistry(rng=random.Random(5))
    old = registry.create("h1")
    new = registry.create("h2")
    registry.bind("p1", new.code)

    assert registry.unbind("p1", old.code) is None
    assert registry.room_code_for("p1") == new.code
    assert registry.unbind("p1", new.code) == new.code
    assert registry.room_code_for("p1") is None


def test_late_disconnect_from_an_old_room_keeps_the_new_route():
    async def scenario():
        service = _service()
        old = await service.create_room("h1")
        new = await service.create_room("h2")
        await service.join(old.code, "p1", "Pat")
        await service.join(new.code, "p1", "Pat")
        service.disconnect("p1", old.code)
        moved = await service.select_team("p1", Team.OUTLAWS)
        return service, new, moved

    service, new, moved = asyncio.run(scenario())

    assert service.room_code_for("p1") == new.code
    assert moved.team == Team.OUTLAWS
