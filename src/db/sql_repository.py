"""Implementation of (Point)Repository using SQLAlchemy (asyncio)"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, time, timedelta, timezone
from typing import AsyncIterator, Callable, Optional
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.exceptions import RemoteSyncError
from src.core.models import Player, Point, utc_now
from src.core.shared_types import PointType, Side
from src.db.schema import DBPlayer, DBPoint

logger = logging.getLogger(__name__)


def coerce_utc(value: datetime) -> datetime:
    """Return a UTC-normalized datetime, assuming naive values are already UTC (SQLite drops the offset)."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SQLPointRepository:
    """Points stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.sessions = sessions
        self.clock = clock

    async def fetch_todays_points(self) -> list[Point]:
        """All points created today, oldest first."""
        start, end = self._today()
        query = (
            select(DBPoint)
            .where(DBPoint.created_at >= start, DBPoint.created_at < end)
            .order_by(DBPoint.created_at)
        )
        async with self._session("fetch today's points") as db:
            rows = (await db.scalars(query)).all()
        logger.info("Fetched %d points for %s", len(rows), start.date().isoformat())
        return [self._to_point(row) for row in rows]

    async def append_point(self, point: Point) -> Point:
        """Store new point and return it with the newly created remote ID."""
        point_db = DBPoint(
            id=str(uuid4()),
            client_id=point.client_id,
            created_at=coerce_utc(point.created_at),
            winner=point.winner.value,
            type=point.type.value if point.type else None,
            player_id=point.player_id,
        )
        async with self._session("insert point") as db:
            db.add(point_db)
            await db.commit()
        logger.info("Point %s stored with id %s", point.client_id, point_db.id)
        return point.with_remote_id(point_db.id)

    async def delete_most_recent_point(self) -> Optional[Point]:
        """Delete the newest point (by creation time) and return it."""
        query = select(DBPoint).order_by(DBPoint.created_at.desc()).limit(1)
        async with self._session("delete last point") as db:
            point_db = await db.scalar(query)
            if point_db is None:
                logger.warning("No points found to delete")
                return None
            deleted = self._to_point(point_db)
            await db.delete(point_db)
            await db.commit()
        logger.info("Last point %s deleted", deleted.id)
        return deleted

    async def delete_point(self, point_id: str) -> None:
        """Remove a single point's record."""
        async with self._session("delete point") as db:
            await db.execute(delete(DBPoint).where(DBPoint.id == point_id))
            await db.commit()
        logger.info("Point %s deleted", point_id)

    async def delete_all_points_for_today(self) -> None:
        start, end = self._today()
        async with self._session("delete today's points") as db:
            await db.execute(
                delete(DBPoint).where(DBPoint.created_at >= start, DBPoint.created_at < end)
            )
            await db.commit()
        logger.info("All points of %s deleted", start.date().isoformat())

    async def fetch_player_roster(self) -> list[Player]:
        async with self._session("fetch players") as db:
            rows = (await db.scalars(select(DBPlayer).order_by(DBPlayer.id))).all()
        return [
            Player(
                id=row.id,
                first_name=row.first_name,
                last_name=row.last_name,
                username=row.username,
            )
            for row in rows
        ]

    # -- Internal helpers --
    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Session whose database errors surface as RemoteSyncError."""
        try:
            async with self.sessions() as db:
                yield db
        except SQLAlchemyError as e:
            logger.warning("Failed to %s: %s", operation, e)
            raise RemoteSyncError(f"Failed to {operation}.") from e

    def _today(self) -> tuple[datetime, datetime]:
        """Half-open interval [00:00, next day 00:00) of the current UTC day."""
        now = coerce_utc(self.clock())
        start = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
        return start, start + timedelta(days=1)

    def _to_point(self, point_db: DBPoint) -> Point:
        """Convert SQLAlchemy model to data transfer model."""
        return Point(
            id=point_db.id,
            client_id=point_db.client_id,
            created_at=coerce_utc(point_db.created_at),
            winner=Side(point_db.winner),
            type=PointType(point_db.type) if point_db.type else None,
            player_id=point_db.player_id,
        )
