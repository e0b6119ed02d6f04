"""Generate (async) database sessions for the remote point store."""

from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.core.config import database_url
from src.db.schema import Base

_engine: Optional[AsyncEngine] = None


def get_engine(url: Optional[str] = None) -> AsyncEngine:
    """
    Lazily create the engine, so importing this module has no side effects.

    There is one engine per process: once it exists, asking for a different url raises ValueError
    (call dispose_engine first to switch databases).
    """
    global _engine

    if _engine is not None:
        if url is not None and make_url(url) != _engine.url:
            raise ValueError(
                f"Engine already created for {_engine.url!r}, cannot switch to {url!r}."
            )
    else:
        url = url or database_url()
        engine_kwargs: dict = {"echo": False}
        if url.startswith("sqlite") and ":memory:" in url:
            # In-memory SQLite must reuse the same connection to keep its tables
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        _engine = create_async_engine(url, **engine_kwargs)

    return _engine


def session_factory(engine: Optional[AsyncEngine] = None) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine or get_engine(), expire_on_commit=False)


async def create_tables(engine: Optional[AsyncEngine] = None) -> None:
    """Ensure all tables are created"""
    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global _engine

    if _engine is not None:
        await _engine.dispose()
        _engine = None
