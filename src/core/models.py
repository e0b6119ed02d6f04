"""
Boundary layer data model(s).

These objects are passed between the service, the scoring layer and the repository.
(A Point is the one event type of the log; everything else about the score is derived from a sequence of them.)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from src.core.shared_types import PointType, Side


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Point:
    """One scored rally. Never edited: corrections are deletions."""

    winner: Side
    created_at: datetime
    type: Optional[PointType] = None
    player_id: Optional[int] = None
    id: Optional[str] = None  # assigned by the remote store
    client_id: UUID = field(default_factory=uuid4)

    @classmethod
    def new(
        cls,
        winner: Side,
        point_type: Optional[PointType] = None,
        player_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> Point:
        """Fresh, not yet persisted point stamped with the current UTC time."""
        return cls(
            winner=winner,
            created_at=created_at or utc_now(),
            type=point_type,
            player_id=player_id,
        )

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def with_remote_id(self, remote_id: str) -> Point:
        return replace(self, id=remote_id)


@dataclass(frozen=True)
class Player:
    id: int
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.username:
            return f"@{self.username}"
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name


@dataclass(frozen=True)
class LastAction:
    """The single most recent score change, kept for undo."""

    side: Side
    was_increment: bool
