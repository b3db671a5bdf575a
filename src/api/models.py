"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.square import Square
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import PromotionChoice


# --- REQUEST MODELS ---
class MoveRequest(BaseModel):
    from_square: str
    to_square: str
    promote_to: Optional[PromotionChoice] = None
    is_teleport: bool = False
    is_remote: bool = False

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not Square.from_algebraic(value).is_within_bounds():
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value.lower()

    @field_validator("promote_to", mode="before")
    @classmethod
    def validate_promote_to(cls, value: Optional[str]) -> Optional[str]:
        if value is None or isinstance(value, PromotionChoice):
            return value
        choices = {choice.value for choice in PromotionChoice}
        if not isinstance(value, str) or value.lower() not in choices:
            raise InvalidRequestError(
                f"Cannot promote to {value!r}. Pick one from {','.join(PromotionChoice)}"
            )
        return value.lower()


class ArchiveRequest(BaseModel):
    match_id: UUID


# --- RESPONSE MODELS ---
class MoveResponse(BaseModel):
    accepted: bool
    result: str
    description: str
    current_player_id: int
    state: str


class MatchResponse(BaseModel):
    match_id: UUID
    moves: list[str]
    current_player_id: int
    state: str
    winner_id: Optional[int]
