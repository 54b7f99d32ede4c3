"""
WebSocket connection tracking and room broadcast.

ConnectionManager is the Notifier the rooms publish through. Each socket
gets a Session recording which room it is listening to and which player
and/or host identity it speaks for.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket

from infra.logger import get_logger

log = get_logger(__name__)


@dataclass(eq=False)
class Session:
    """One open WebSocket and the identities bound to it."""
    ws: WebSocket
    room_code: Optional[str] = None
    player_id: Optional[str] = None
    host_id: Optional[str] = None


class ConnectionManager:
    """
    Tracks sessions per room.

    Safe for the asyncio single-threaded event loop: membership changes
    never await.
    """

    def __init__(self):
        self._rooms: Dict[str, Set[Session]] = {}

    # ── Membership ────────────────────────────────────────────────────────────

    def attach(self, session: Session, room_code: str) -> None:
        if session.room_code and session.room_code != room_code:
            self.detach(session)
        session.room_code = room_code
        self._rooms.setdefault(room_code, set()).add(session)

    def detach(self, session: Session) -> None:
        if session.room_code is None:
            return
        members = self._rooms.get(session.room_code)
        if members is not None:
            members.discard(session)
            if not members:
                self._rooms.pop(session.room_code, None)
        session.room_code = None

    def close_room(self, room_code: str) -> Set[Session]:
        """Forget every session listening to a room and return them."""
        members = self._rooms.pop(room_code, set())
        for session in members:
            session.room_code = None
        return members

    def speaks_for(self, participant_id: str, room_code: str) -> bool:
        """True while some attached session in the room carries this id."""
        return any(
            participant_id in (session.player_id, session.host_id)
            for session in self._rooms.get(room_code, ())
        )

    # ── Sending ───────────────────────────────────────────────────────────────

    async def send(self, session: Session, event: str, data: Dict[str, Any]) -> None:
        """Send a private message to a single session."""
        try:
            await session.ws.send_json({"type": event, "data": data})
        except Exception as exc:
            log.warning("send %s to %s failed: %s", event, session.player_id or session.host_id, exc)
            self.detach(session)

    async def publish(self, room_code: str, event: str, payload: Dict[str, Any]) -> None:
        """Broadcast to every session in the room."""
        for session in list(self._rooms.get(room_code, ())):
            await self.send(session, event, payload)
