"""
Orchestration of score changes: point log, projection, attribution and remote persistence.

Every change is applied to the local log first and the score is recomputed from the log right away. The remote call
runs afterwards as an asyncio task. When it fails the local log is reconciled (the change is rolled back), except for a
reset, which always wins locally.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Coroutine, Optional

from src.api.models import (
    AdjustmentRequest,
    HistoryEntryResponse,
    PlayerSelectionRequest,
    PointResponse,
    PointTypeRequest,
    ScoreResponse,
)
from src.core.exceptions import AttributionStateError, RemoteSyncError
from src.core.models import LastAction, Point, utc_now
from src.core.shared_types import AdjustmentOutcome, PointType, Side, SyncStatus
from src.db.repository import PointRepository
from src.scoring.attribution import Attribution, AttributionFlow
from src.scoring.point_log import PointLog
from src.scoring.projection import ScoreLine, ScoreState, project, running_scores

logger = logging.getLogger(__name__)


class ScoreService:
    """
    Owner of one day's scoring session.

    Must be used from a single asyncio event loop: all methods that change the log are synchronous and schedule their
    remote call on the running loop.
    """

    def __init__(
        self,
        repository: PointRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repo = repository
        self.clock = clock
        self.log = PointLog()
        self.attribution = AttributionFlow()
        self.state = ScoreState()
        self.status = SyncStatus.NOT_SYNCED
        self.last_action: Optional[LastAction] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def points(self) -> tuple[Point, ...]:
        return self.log.points

    # -- Session start --
    async def initialize(self) -> bool:
        """Seed the log with today's points. On failure the session still works, starting from an empty log."""
        try:
            points = await self.repo.fetch_todays_points()
        except RemoteSyncError as e:
            logger.warning("Could not load today's points: %s", e)
            self.log = PointLog()
            self.status = SyncStatus.ERROR
            self._recalculate()
            return False

        self.log = PointLog(points)
        self.status = SyncStatus.SYNCED
        self._recalculate()
        logger.info("Loaded %d points", len(self.log))
        return True

    # -- Score adjustments --
    def request_adjustment(self, request: AdjustmentRequest) -> AdjustmentOutcome:
        """
        A score gesture for one side.
        ----
        Decrements remove the most recent point right away. Increments are staged until a point type (and maybe a
        player) is picked, see select_point_type / select_player.
        """
        if request.delta <= 0:
            if self.delete_last_point_and_update_score() is None:
                return AdjustmentOutcome.IGNORED
            self.last_action = LastAction(side=request.side, was_increment=False)
            return AdjustmentOutcome.APPLIED

        if not self.attribution.is_idle:
            logger.warning(
                "Ignoring point for %s: a point for %s is still waiting for attribution",
                request.side,
                self.attribution.pending.side,
            )
            return AdjustmentOutcome.BUSY

        self.attribution.begin(request.side, request.delta, request.player_id)
        return AdjustmentOutcome.STAGED

    def select_point_type(self, request: PointTypeRequest) -> Optional[Point]:
        """Returns the committed point, or None when a player must be picked first."""
        attribution = self.attribution.select_point_type(request.point_type)
        if attribution is None:
            return None
        return self._commit_attribution(attribution)

    def select_player(self, request: PlayerSelectionRequest) -> Point:
        """Commit the pending point for the chosen player. A request without player_id skips the choice."""
        return self._commit_attribution(self.attribution.select_player(request.player_id))

    def skip_player(self) -> Point:
        return self.select_player(PlayerSelectionRequest())

    def back_to_point_type(self) -> None:
        self.attribution.back()

    def cancel_adjustment(self) -> None:
        discarded = self.attribution.cancel()
        if discarded:
            logger.info("Discarded pending point for %s", discarded.side)

    def confirm_adjustment(
        self, point_type: PointType, player_id: Optional[int] = None
    ) -> Point:
        """Commit the pending adjustment directly with the given attribution."""
        pending = self.attribution.pending
        if pending is None:
            raise AttributionStateError("No score adjustment is pending.")
        self.attribution.cancel()
        return self._commit_attribution(
            Attribution(side=pending.side, point_type=point_type, player_id=player_id)
        )

    def delete_last_point_and_update_score(self) -> Optional[Point]:
        """Remove the most recent point, locally and remotely. Returns the removed point."""
        point = self.log.remove_last()
        if point is None:
            logger.warning("No points in local history to delete")
            return None

        self._recalculate()
        self._schedule(self._remote_delete, point)
        return point

    def delete_specific_point(self, point: Point) -> bool:
        removed = self.log.remove(point.client_id)
        if removed is None:
            logger.warning("Point %s is not in the local history", point.client_id)
            return False

        self._recalculate()
        self._schedule(self._remote_delete, removed)
        return True

    def reset_all(self) -> None:
        """Clear everything. Not rolled back if the remote cleanup fails."""
        self.log.clear()
        self.attribution.cancel()
        self.last_action = None
        self._recalculate()
        self._schedule(self._remote_reset)

    def undo_last_action(self) -> bool:
        """
        Revert the last score change (one level only).
        ----
        An increment is undone by deleting the last point. A decrement is undone by adding a point for that side
        again, without type or player.
        """
        action = self.last_action
        self.last_action = None
        if action is None:
            logger.info("Nothing to undo")
            return False

        if action.was_increment:
            return self.delete_last_point_and_update_score() is not None

        self._append(action.side, point_type=None, player_id=None)
        return True

    # -- Read side --
    def history(self) -> list[ScoreLine]:
        return running_scores(self.log)

    def history_response(self) -> list[HistoryEntryResponse]:
        return [
            HistoryEntryResponse(
                point=PointResponse.from_point(line.point),
                set_number=line.set_number,
                score=line.score_string,
            )
            for line in self.history()
        ]

    def score_response(self) -> ScoreResponse:
        pending = self.attribution.pending
        return ScoreResponse(
            left_score=self.state.left_score,
            right_score=self.state.right_score,
            left_wins=self.state.left_wins,
            right_wins=self.state.right_wins,
            current_set_number=self.state.current_set_number,
            leader=self.state.leader,
            status=self.status,
            attribution_step=self.attribution.step,
            pending_side=pending.side if pending else None,
        )

    async def drain(self) -> None:
        """Wait until every scheduled remote call (and its reconciliation) has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # -- Remote calls + reconciliation --
    async def _remote_append(self, point: Point) -> None:
        try:
            stored = await self.repo.append_point(point)
        except RemoteSyncError as e:
            logger.warning("Failed to track point %s: %s", point.client_id, e)
            self.status = SyncStatus.ERROR
            if self.log.remove(point.client_id) is not None:
                self._recalculate()
            return

        self.status = SyncStatus.SYNCED
        if self.log.replace(stored):
            return

        # Deleted (or reset) locally while the append was in flight
        logger.info("Point %s was removed before it was stored, deleting it remotely", stored.client_id)
        try:
            await self.repo.delete_point(stored.id)
        except RemoteSyncError as e:
            logger.warning("Failed to delete point %s: %s", stored.id, e)
            self.status = SyncStatus.ERROR

    async def _remote_delete(self, point: Point) -> None:
        if point.id is None:
            # _remote_append deletes it once the remote id is known
            logger.info("Point %s is not stored remotely yet, deleting it once stored", point.client_id)
            return

        try:
            await self.repo.delete_point(point.id)
        except RemoteSyncError as e:
            logger.warning("Failed to delete point %s: %s", point.id, e)
            self.status = SyncStatus.ERROR
            self._restore(point)
            return

        self.status = SyncStatus.SYNCED

    async def _remote_reset(self) -> None:
        try:
            await self.repo.delete_all_points_for_today()
        except RemoteSyncError as e:
            logger.error("Failed to delete today's points remotely; local reset is kept: %s", e)
            self.status = SyncStatus.ERROR
            return

        self.status = SyncStatus.SYNCED
        logger.info("Reset completed: all data cleared")

    # -- Internal helpers --
    def _commit_attribution(self, attribution: Attribution) -> Point:
        point = self._append(attribution.side, attribution.point_type, attribution.player_id)
        self.last_action = LastAction(side=attribution.side, was_increment=True)
        return point

    def _append(
        self, side: Side, point_type: Optional[PointType], player_id: Optional[int]
    ) -> Point:
        point = Point.new(side, point_type, player_id, created_at=self.clock())
        self.log.append(point)
        self._recalculate()
        self._schedule(self._remote_append, point)
        return point

    def _restore(self, point: Point) -> None:
        if point in self.log:
            return
        self.log.insert_in_order(point)
        self._recalculate()

    def _recalculate(self) -> None:
        self.state = project(self.log)

    def _schedule(
        self, remote_call: Callable[..., Coroutine[Any, Any, None]], *args: Any
    ) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(remote_call(*args))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
