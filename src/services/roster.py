"""Cached player roster and team lineups, used to offer players when attributing a point."""

import asyncio
import logging
import time
from typing import Callable, Iterable, Optional

from src.core.config import LINEUP_SIZE, roster_cache_seconds
from src.core.exceptions import InvalidRequestError, RemoteSyncError
from src.core.models import Player
from src.core.shared_types import Side
from src.db.repository import PointRepository

logger = logging.getLogger(__name__)


class TeamLineups:
    """Player ids per position (1-based) for both sides. Empty positions are None."""

    def __init__(self, size: int = LINEUP_SIZE) -> None:
        self.size = size
        self._positions: dict[Side, list[Optional[int]]] = {
            side: [None] * size for side in Side
        }

    def assign(self, side: Side, position: int, player_id: Optional[int]) -> None:
        if not 1 <= position <= self.size:
            raise InvalidRequestError(
                f"Position must be between 1 and {self.size}, got {position}."
            )
        self._positions[side][position - 1] = player_id

    def positions(self, side: Side) -> list[Optional[int]]:
        return list(self._positions[side])

    def player_ids(self, side: Side) -> list[int]:
        return [p for p in self._positions[side] if p is not None]

    def available(self, players: Iterable[Player]) -> list[Player]:
        """Players not placed on either side."""
        used = set(self.player_ids(Side.LEFT)) | set(self.player_ids(Side.RIGHT))
        return [p for p in players if p.id not in used]


class PlayerRoster:
    """Roster fetched through the repository, kept for `cache_seconds` before it is fetched again."""

    def __init__(
        self,
        repository: PointRepository,
        cache_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.repo = repository
        self.cache_seconds = (
            cache_seconds if cache_seconds is not None else roster_cache_seconds()
        )
        self.clock = clock
        self._players: list[Player] = []
        self._loaded_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def players(self) -> list[Player]:
        return list(self._players)

    @property
    def is_loaded(self) -> bool:
        return self._loaded_at is not None

    @property
    def is_fresh(self) -> bool:
        """An empty roster counts as loaded too."""
        if self._loaded_at is None:
            return False
        return self.clock() - self._loaded_at < self.cache_seconds

    async def load(self) -> list[Player]:
        """Fetch the roster unless the cache is still fresh. Concurrent callers share one fetch."""
        async with self._lock:
            if self.is_fresh:
                return self.players
            try:
                players = await self.repo.fetch_player_roster()
            except RemoteSyncError as e:
                logger.warning("Failed to load players: %s", e)
                return self.players

            self._players = list(players)
            self._loaded_at = self.clock()
            logger.info("Players loaded and cached: %d players", len(self._players))
            return self.players

    async def refresh(self) -> list[Player]:
        self._loaded_at = None
        return await self.load()

    def find(self, player_id: int) -> Optional[Player]:
        return next((p for p in self._players if p.id == player_id), None)

    def sorted_by_name(self) -> list[Player]:
        return sorted(self._players, key=lambda p: p.display_name)

    def players_for_attribution(self, side: Side, lineups: TeamLineups) -> list[Player]:
        """The side's lineup players first (in lineup order), then everyone else."""
        team_ids = lineups.player_ids(side)
        team = [player for pid in team_ids if (player := self.find(pid)) is not None]
        others = [p for p in self._players if p.id not in set(team_ids)]
        return team + others
