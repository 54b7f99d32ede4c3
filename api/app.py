"""HTTP + WebSocket entrypoint for the arena display and phone controllers."""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from rooms import RoomError, RoomRegistry, RoomService, NotFound, GuardFailed
from infra.logger import get_logger
from infra.settings import Settings, load_settings

from .connections import ConnectionManager, Session
from .schemas import (
    CreateRoomRequest,
    ResumeHostRequest,
    JoinRoomRequest,
    SelectTeamRequest,
    LockActionRequest,
    UpdateConfigRequest,
    parse_payload,
)

log = get_logger(__name__)

Handler = Callable[["CommandHandlers", Session, Dict[str, Any]], Awaitable[None]]


class CommandHandlers:
    """
    One method per client command. Each validates its payload, calls the
    service and answers the calling session where the command has a
    private reply; room-wide updates arrive through the notifier.
    """

    def __init__(self, service: RoomService, connections: ConnectionManager):
        self.service = service
        self.connections = connections

    async def create_room(self, session: Session, data: Dict[str, Any]) -> None:
        request = parse_payload(CreateRoomRequest, data)
        room = await self.service.create_room(request.host_id, request.config.to_config())
        session.host_id = request.host_id
        self.connections.attach(session, room.code)
        await self.connections.send(session, "room_created", {"room_code": room.code})
        await self.connections.send(session, "game_state", room.snapshot())

    async def resume_host(self, session: Session, data: Dict[str, Any]) -> None:
        request = parse_payload(ResumeHostRequest, data)
        snapshot = await self.service.resume_host(request.room_code, request.host_id)
        session.host_id = request.host_id
        self.connections.attach(session, request.room_code)
        await self.connections.send(session, "game_state", snapshot)

    async def join_room(self, session: Session, data: Dict[str, Any]) -> None:
        request = parse_payload(JoinRoomRequest, data)
        player = await self.service.join(request.room_code, request.player_id, request.player_name)
        session.player_id = player.id
        self.connections.attach(session, request.room_code)
        await self.connections.send(session, "joined", {
            "player": player.to_dict(),
            "room_code": request.room_code,
        })
        await self.connections.send(session, "game_state", self.service.get_state(request.room_code))

    async def select_team(self, session: Session, data: Dict[str, Any]) -> None:
        request = parse_payload(SelectTeamRequest, data)
        await self.service.select_team(self._player_id(session), request.team)

    async def leave_team(self, session: Session, data: Dict[str, Any]) -> None:
        await self.service.leave_team(self._player_id(session))

    async def lock_action(self, session: Session, data: Dict[str, Any]) -> None:
        request = parse_payload(LockActionRequest, data)
        await self.service.lock_action(self._player_id(session), request.action)

    async def start_game(self, session: Session, data: Dict[str, Any]) -> None:
        await self.service.start_game(self._room_code(session))

    async def play_again(self, session: Session, data: Dict[str, Any]) -> None:
        await self.service.play_again(self._room_code(session))

    async def end_session(self, session: Session, data: Dict[str, Any]) -> None:
        host_id = self._host_id(session)
        room_code = self._room_code(session)
        await self.service.end_session(room_code, host_id)
        for member in self.connections.close_room(room_code):
            await self.connections.send(member, "session_ended", {"room_code": room_code})

    async def update_config(self, session: Session, data: Dict[str, Any]) -> None:
        request = parse_payload(UpdateConfigRequest, data)
        await self.service.update_config(
            self._room_code(session),
            self._host_id(session),
            tick_duration=request.tick_duration,
            slots_per_side=request.slots_per_side,
        )

    def disconnect(self, session: Session) -> None:
        room_code = session.room_code
        self.connections.detach(session)
        if room_code is None:
            return
        # A newer socket may already speak for the same identity
        for participant_id in {session.player_id, session.host_id} - {None}:
            if not self.connections.speaks_for(participant_id, room_code):
                self.service.disconnect(participant_id, room_code)

    # ── Session identity ──────────────────────────────────────────────────────

    def _player_id(self, session: Session) -> str:
        if not session.player_id:
            raise GuardFailed("Join a room first", "NOT_JOINED")
        return session.player_id

    def _host_id(self, session: Session) -> str:
        if not session.host_id:
            raise GuardFailed("Only the host can do that", "NOT_HOST")
        return session.host_id

    def _room_code(self, session: Session) -> str:
        if session.room_code:
            return session.room_code
        for participant_id in (session.player_id, session.host_id):
            if participant_id:
                code = self.service.room_code_for(participant_id)
                if code:
                    return code
        raise NotFound("Not in a room", "NOT_IN_ROOM")


COMMANDS: Dict[str, Handler] = {
    "create_room": CommandHandlers.create_room,
    "resume_host": CommandHandlers.resume_host,
    "join_room": CommandHandlers.join_room,
    "select_team": CommandHandlers.select_team,
    "leave_team": CommandHandlers.leave_team,
    "lock_action": CommandHandlers.lock_action,
    "start_game": CommandHandlers.start_game,
    "play_again": CommandHandlers.play_again,
    "end_session": CommandHandlers.end_session,
    "update_config": CommandHandlers.update_config,
}


def create_app(settings: Optional[Settings] = None, registry: Optional[RoomRegistry] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Server settings; read from the environment when omitted
        registry: Pre-built registry (tests); its notifier is replaced by
            the app's ConnectionManager
    """
    settings = settings or load_settings()
    connections = ConnectionManager()
    if registry is None:
        registry = RoomRegistry(resolution_delay_ms=settings.resolution_delay_ms)
    registry.notifier = connections
    service = RoomService(registry)
    handlers = CommandHandlers(service, connections)

    app = FastAPI(title="Standoff")
    app.state.settings = settings
    app.state.service = service
    app.state.connections = connections

    # Phones join from other LAN origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/rooms")
    async def create_room(request: CreateRoomRequest):
        room = await service.create_room(request.host_id, request.config.to_config())
        return {"room_code": room.code}

    @app.get("/rooms/{room_code}")
    def get_room(room_code: str):
        try:
            return service.get_state(room_code)
        except RoomError as exc:
            raise HTTPException(404, exc.message) from exc

    @app.get("/status")
    def status():
        return {"rooms": len(registry)}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        await ws.accept()
        session = Session(ws=ws)
        try:
            while True:
                raw = await ws.receive_text()
                await _handle_frame(handlers, session, raw)
        except WebSocketDisconnect:
            pass
        finally:
            handlers.disconnect(session)

    return app


async def _handle_frame(handlers: CommandHandlers, session: Session, raw: str) -> None:
    connections = handlers.connections
    try:
        frame = json.loads(raw)
    except json.JSONDecodeError:
        await connections.send(session, "error", {"code": "PARSE_ERROR", "message": "Invalid JSON"})
        return
    if not isinstance(frame, dict):
        await connections.send(session, "error", {"code": "PARSE_ERROR", "message": "Expected an object"})
        return

    command = frame.get("type", "")
    handler = COMMANDS.get(command)
    if handler is None:
        await connections.send(session, "error", {
            "code": "UNKNOWN_COMMAND",
            "message": f"Unknown command: {command!r}",
        })
        return

    data = frame.get("data") if isinstance(frame.get("data"), dict) else {}
    try:
        await handler(handlers, session, data)
    except RoomError as exc:
        log.info("%s refused: %s (%s)", command, exc.message, exc.code)
        await connections.send(session, "error", exc.to_dict())
    except WebSocketDisconnect:
        raise
    except Exception:
        log.exception("Unhandled error in %s", command)
        await connections.send(session, "error", {"code": "SERVER_ERROR", "message": "Internal server error"})
