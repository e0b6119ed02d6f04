"""Protocol for the remote point store (implemented with SQLAlchemy in sql_repository.py, mocked in tests)."""

from typing import Optional, Protocol

from src.core.models import Player, Point


class PointRepository(Protocol):
    """
    Remote persistence of today's points.

    Every call may suspend for a network round trip. Failures are raised as RemoteSyncError.
    """

    async def fetch_todays_points(self) -> list[Point]:
        """All points created today, oldest first."""
        ...

    async def append_point(self, point: Point) -> Point:
        """Store a new point and return it with its remote id."""
        ...

    async def delete_most_recent_point(self) -> Optional[Point]:
        """Delete the newest point by creation time and return it (None if there was nothing to delete)."""
        ...

    async def delete_point(self, point_id: str) -> None:
        """Delete one point by its remote id."""
        ...

    async def delete_all_points_for_today(self) -> None:
        """Remove every point created today."""
        ...

    async def fetch_player_roster(self) -> list[Player]:
        """Read-only list of players that points can be attributed to."""
        ...
