"""Request payloads accepted at the API boundary."""

from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from standoff.core.types import Team, ActionType
from standoff.world import (
    GameConfig,
    DEFAULT_TICK_DURATION,
    MIN_TICK_DURATION,
    MAX_TICK_DURATION,
    DEFAULT_SLOTS_PER_SIDE,
    MIN_SLOTS_PER_SIDE,
    MAX_SLOTS_PER_SIDE,
)
from rooms.errors import ValidationFailed

ROOM_CODE_PATTERN = r"^[A-Z]{4}$"
MAX_NAME_LENGTH = 20

Model = TypeVar("Model", bound=BaseModel)


class GameConfigModel(BaseModel):
    tick_duration: int = Field(DEFAULT_TICK_DURATION, ge=MIN_TICK_DURATION, le=MAX_TICK_DURATION)
    slots_per_side: int = Field(DEFAULT_SLOTS_PER_SIDE, ge=MIN_SLOTS_PER_SIDE, le=MAX_SLOTS_PER_SIDE)

    def to_config(self) -> GameConfig:
        return GameConfig(tick_duration=self.tick_duration, slots_per_side=self.slots_per_side)


class CreateRoomRequest(BaseModel):
    host_id: str = Field(min_length=1)
    config: GameConfigModel = Field(default_factory=GameConfigModel)


class _RoomCodeModel(BaseModel):
    room_code: str = Field(pattern=ROOM_CODE_PATTERN)

    @field_validator("room_code", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


class ResumeHostRequest(_RoomCodeModel):
    host_id: str = Field(min_length=1)


class JoinRoomRequest(_RoomCodeModel):
    player_name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    player_id: str = Field(min_length=1)


class SelectTeamRequest(BaseModel):
    team: Team


class LockActionRequest(BaseModel):
    action: ActionType


class UpdateConfigRequest(BaseModel):
    """Partial update; the room clamps whatever is given."""
    tick_duration: Optional[int] = None
    slots_per_side: Optional[int] = None


def parse_payload(model: Type[Model], data: Optional[Dict[str, Any]]) -> Model:
    """
    Validate a command payload.

    Raises:
        ValidationFailed: With the first pydantic error as the message
    """
    try:
        return model.model_validate(data or {})
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "payload"
        raise ValidationFailed(f"Invalid {location}: {first.get('msg', 'invalid value')}") from exc
