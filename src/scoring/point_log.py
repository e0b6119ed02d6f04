"""The ordered log of points. Single source of truth for the score."""

from __future__ import annotations

from bisect import bisect_right
from typing import Iterable, Iterator, Optional
from uuid import UUID

from src.core.models import Point


class PointLog:
    """
    Points in ascending order of creation time.

    Points are matched by their client_id, never by index: a remote completion may arrive after other points
    were inserted or removed.
    """

    def __init__(self, points: Iterable[Point] = ()) -> None:
        self._points: list[Point] = sorted(points, key=lambda p: p.created_at)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __contains__(self, point: object) -> bool:
        if not isinstance(point, Point):
            return False
        return self.index_of(point.client_id) is not None

    @property
    def points(self) -> tuple[Point, ...]:
        return tuple(self._points)

    @property
    def last(self) -> Optional[Point]:
        return self._points[-1] if self._points else None

    def append(self, point: Point) -> None:
        """New points are the most recent ones, so they go at the end."""
        self._points.append(point)

    def insert_in_order(self, point: Point) -> int:
        """Put a point back where its timestamp belongs (after any point with the same timestamp)."""
        index = bisect_right(self._points, point.created_at, key=lambda p: p.created_at)
        self._points.insert(index, point)
        return index

    def remove_last(self) -> Optional[Point]:
        if not self._points:
            return None
        return self._points.pop()

    def remove(self, client_id: UUID) -> Optional[Point]:
        index = self.index_of(client_id)
        if index is None:
            return None
        return self._points.pop(index)

    def replace(self, point: Point) -> bool:
        """Swap in a new version of a point (same client_id), e.g. once the remote id is known."""
        index = self.index_of(point.client_id)
        if index is None:
            return False
        self._points[index] = point
        return True

    def find(self, client_id: UUID) -> Optional[Point]:
        index = self.index_of(client_id)
        return None if index is None else self._points[index]

    def index_of(self, client_id: UUID) -> Optional[int]:
        return next(
            (i for i, p in enumerate(self._points) if p.client_id == client_id),
            None,
        )

    def clear(self) -> None:
        self._points.clear()
