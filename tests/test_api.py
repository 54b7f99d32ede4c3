import random

import pytest
from fastapi.testclient import TestClient

from rooms import RoomRegistry
from infra.settings import Settings
from api.app import create_app


@pytest.fixture
def client():
    app = create_app(Settings(logfile=None), RoomRegistry(rng=random.Random(2)))
    with TestClient(app) as test_client:
        yield test_client


def _send(ws, command, **data):
    ws.send_json({"type": command, "data": data})


def _receive_until(ws, frame_type, limit=20):
    for _ in range(limit):
        frame = ws.receive_json()
        if frame["type"] == frame_type:
            return frame
    raise AssertionError(f"no {frame_type} frame")


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

def test_create_and_inspect_a_room_over_http(client):
    response = client.post("/rooms", json={"host_id": "h", "config": {"slots_per_side": 3}})
    assert response.status_code == 200
    code = response.json()["room_code"]

    state = client.get(f"/rooms/{code.lower()}").json()

    assert state["room_code"] == code
    assert state["phase"] == "lobby"
    assert len(state["barrels"]) == 6
    assert client.get("/status").json() == {"rooms": 1}


def test_unknown_room_is_404(client):
    assert client.get("/rooms/ZZZZ").status_code == 404


def test_http_rejects_out_of_range_config(client):
    response = client.post("/rooms", json={"host_id": "h", "config": {"tick_duration": 50}})

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# WebSocket errors
# ---------------------------------------------------------------------------

def test_garbage_frames_get_parse_errors(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_text("not json")
        assert ws.receive_json()["data"]["code"] == "PARSE_ERROR"

        ws.send_text("[1, 2]")
        assert ws.receive_json()["data"]["code"] == "PARSE_ERROR"


def test_unknown_command(client):
    with client.websocket_connect("/ws") as ws:
        _send(ws, "fly_away")

        frame = ws.receive_json()

    assert frame["type"] == "error"
    assert frame["data"]["code"] == "UNKNOWN_COMMAND"


def test_invalid_payload_and_missing_identity(client):
    with client.websocket_connect("/ws") as ws:
        _send(ws, "join_room", room_code="ABCD", player_name="", player_id="p1")
        invalid = ws.receive_json()
        _send(ws, "select_team", team="sheriffs")
        not_joined = ws.receive_json()
        _send(ws, "end_session")
        not_host = ws.receive_json()

    assert invalid["data"]["code"] == "INVALID_PAYLOAD"
    assert not_joined["data"]["code"] == "NOT_JOINED"
    assert not_host["data"]["code"] == "NOT_HOST"


def test_joining_a_missing_room(client):
    with client.websocket_connect("/ws") as ws:
        _send(ws, "join_room", room_code="QQQQ", player_name="Pat", player_id="p1")

        frame = ws.receive_json()

    assert frame == {"type": "error", "data": {"code": "ROOM_NOT_FOUND", "message": "Room not found"}}


# ---------------------------------------------------------------------------
# WebSocket game flow
# ---------------------------------------------------------------------------

def test_host_and_players_play_through_the_socket(client):
    with client.websocket_connect("/ws") as host:
        _send(host, "create_room", host_id="h", config={"slots_per_side": 2})
        code = host.receive_json()["data"]["room_code"]
        assert host.receive_json()["type"] == "game_state"

        with client.websocket_connect("/ws") as p1, client.websocket_connect("/ws") as p2:
            _send(p1, "join_room", room_code=code, player_name="Pat", player_id="p1")
            joined = p1.receive_json()
            assert joined["type"] == "joined"
            assert joined["data"]["player"]["team"] == "sheriffs"

            _send(p2, "join_room", room_code=code, player_name="Kim", player_id="p2")
            assert p2.receive_json()["data"]["player"]["team"] == "outlaws"

            _send(host, "update_config", tick_duration=5000)
            state = _receive_until(host, "game_state")
            while state["data"]["config"]["tick_duration"] != 5000:
                state = _receive_until(host, "game_state")

            _send(host, "start_game")
            round_start = _receive_until(host, "round_start")
            assert round_start["data"]["round"] == 1
            assert round_start["data"]["duration_ms"] == 5000

            _send(p1, "lock_action", action="RELOAD")
            locked = _receive_until(p2, "action_locked")
            assert locked["data"] == {"player_id": "p1"}

            _send(p1, "lock_action", action="COVER")
            error = _receive_until(p1, "error")
            assert error["data"]["code"] == "ALREADY_LOCKED"

            _send(host, "end_session")
            assert _receive_until(p1, "session_ended")["data"] == {"room_code": code}
            assert _receive_until(p2, "session_ended")["data"] == {"room_code": code}
            assert _receive_until(host, "session_ended")["data"] == {"room_code": code}

    assert client.get("/status").json() == {"rooms": 0}


def test_host_can_resume_from_a_new_socket(client):
    code = client.post("/rooms", json={"host_id": "h"}).json()["room_code"]

    with client.websocket_connect("/ws") as ws:
        _send(ws, "resume_host", room_code=code, host_id="h")
        frame = ws.receive_json()

    assert frame["type"] == "game_state"
    assert frame["data"]["room_code"] == code


def test_closing_an_old_socket_keeps_a_reconnected_player_routed(client):
    code = client.post("/rooms", json={"host_id": "h"}).json()["room_code"]

    with client.websocket_connect("/ws") as fresh:
        with client.websocket_connect("/ws") as stale:
            _send(stale, "join_room", room_code=code, player_name="Pat", player_id="p1")
            assert stale.receive_json()["type"] == "joined"

            _send(fresh, "join_room", room_code=code, player_name="Pat", player_id="p1")
            assert fresh.receive_json()["type"] == "joined"

        _send(fresh, "select_team", team="outlaws")
        for _ in range(10):
            frame = fresh.receive_json()
            assert frame["type"] != "error", frame
            players = frame["data"].get("players", [])
            if players and players[0]["team"] == "outlaws":
                break
        else:
            raise AssertionError("team change never broadcast")

    state = client.get(f"/rooms/{code}").json()
    assert [p["team"] for p in state["players"]] == ["outlaws"]
