"""Database tables / schema"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class DBPoint(Base):
    __tablename__ = "points"
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    client_id: Mapped[UUID] = mapped_column(unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    winner: Mapped[str] = mapped_column(String(8))
    type: Mapped[Optional[str]] = mapped_column(String(16))
    player_id: Mapped[Optional[int]]


class DBPlayer(Base):
    __tablename__ = "players"
    id: Mapped[int] = mapped_column(primary_key=True)
    first_name: Mapped[str]
    last_name: Mapped[Optional[str]]
    username: Mapped[Optional[str]]
