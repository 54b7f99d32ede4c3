"""
Error taxonomy for room commands.

Every failure a client can cause is a RoomError. None of them are fatal to
the room; the caller gets the code and message back and the state is left
untouched.
"""

from __future__ import annotations

from typing import Any, Dict


class RoomError(Exception):
    """Base class: a command was refused."""

    default_code = "ROOM_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ValidationFailed(RoomError):
    """Malformed or out-of-range payload, rejected at the boundary."""

    default_code = "INVALID_PAYLOAD"


class GuardFailed(RoomError):
    """Well-formed command that violates a transition precondition."""

    default_code = "GUARD_FAILED"


class NotFound(RoomError):
    """Unknown room or participant."""

    default_code = "NOT_FOUND"


class RoomClosed(RoomError):
    """The room's session has ended."""

    default_code = "ROOM_CLOSED"
