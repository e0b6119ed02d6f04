"""Requests and Response models"""

from datetime import datetime
from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.models import Point
from src.core.shared_types import AttributionStep, PointType, Side, SyncStatus


# --- REQUEST MODELS ---
class AdjustmentRequest(BaseModel):
    side: Side
    delta: int
    player_id: Optional[int] = None

    @field_validator("delta")
    @classmethod
    def validate_delta(cls, value: int) -> int:
        if value == 0:
            raise InvalidRequestError("A score adjustment of 0 does not change anything.")
        return value


class PointTypeRequest(BaseModel):
    point_type: PointType


class PlayerSelectionRequest(BaseModel):
    player_id: Optional[int] = None


# --- RESPONSE MODELS ---
class PointResponse(BaseModel):
    id: Optional[str]
    client_id: UUID
    created_at: datetime
    winner: Side
    type: Optional[PointType]
    player_id: Optional[int]

    @classmethod
    def from_point(cls, point: Point) -> Self:
        return cls(
            id=point.id,
            client_id=point.client_id,
            created_at=point.created_at,
            winner=point.winner,
            type=point.type,
            player_id=point.player_id,
        )


class ScoreResponse(BaseModel):
    left_score: int
    right_score: int
    left_wins: int
    right_wins: int
    current_set_number: int
    leader: str
    status: SyncStatus
    attribution_step: AttributionStep
    pending_side: Optional[Side]


class HistoryEntryResponse(BaseModel):
    point: PointResponse
    set_number: int
    score: str
