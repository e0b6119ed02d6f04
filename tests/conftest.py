"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import asyncio
import itertools
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Generator, Optional

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.core.exceptions import RemoteSyncError
from src.core.models import Player, Point
from src.db.schema import Base
from src.db.sql_repository import SQLPointRepository

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite+aiosqlite:///:memory:"

MATCH_DAY = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """
    Mock the PointRepository with a list of points.

    Names of methods in `failing` raise RemoteSyncError. A method with an entry in `gates` waits for that event before
    doing anything (to observe the optimistic state while a remote call is in flight).
    """

    def __init__(self) -> None:
        self.stored: list[Point] = []
        self.roster: list[Player] = []
        self.failing: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[str] = []
        self._ids = itertools.count(1)

    async def fetch_todays_points(self) -> list[Point]:
        await self._enter("fetch_todays_points")
        return sorted(self.stored, key=lambda p: p.created_at)

    async def append_point(self, point: Point) -> Point:
        await self._enter("append_point")
        stored = point.with_remote_id(f"remote-{next(self._ids)}")
        self.stored.append(stored)
        return stored

    async def delete_most_recent_point(self) -> Optional[Point]:
        await self._enter("delete_most_recent_point")
        if not self.stored:
            return None
        newest = max(self.stored, key=lambda p: p.created_at)
        self.stored.remove(newest)
        return newest

    async def delete_point(self, point_id: str) -> None:
        await self._enter("delete_point")
        self.stored = [p for p in self.stored if p.id != point_id]

    async def delete_all_points_for_today(self) -> None:
        await self._enter("delete_all_points_for_today")
        self.stored.clear()

    async def fetch_player_roster(self) -> list[Player]:
        await self._enter("fetch_player_roster")
        return list(self.roster)

    async def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.gates:
            await self.gates[name].wait()
        if name in self.failing:
            raise RemoteSyncError(f"{name} failed (mock)")


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Fresh repository per test"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.stored.clear()


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock advancing one second per call, so points have distinct and increasing timestamps."""
    ticks = itertools.count()
    return lambda: MATCH_DAY + timedelta(seconds=next(ticks))


@asynccontextmanager
async def _sql_repository(
    clock: Callable[[], datetime] = lambda: MATCH_DAY,
) -> AsyncIterator[SQLPointRepository]:
    engine = create_async_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield SQLPointRepository(async_sessionmaker(engine, expire_on_commit=False), clock=clock)
    finally:
        await engine.dispose()


@pytest.fixture
def sql_repository():
    """Async context manager yielding a repository on a fresh in-memory database. Use within a single event loop."""
    return _sql_repository
