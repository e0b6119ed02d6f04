"""
Attribution of a scored point, before it is committed to the log.

A point scoring gesture does not add a point right away. The side is staged first, then a point type is picked and,
for aces/attacks/blocks, a player. Only then is the point ready to be appended.

    IDLE --begin--> AWAITING_POINT_TYPE --error/unspecified--> IDLE (complete)
                    AWAITING_POINT_TYPE --ace/attack/block--> AWAITING_PLAYER
                    AWAITING_PLAYER --player or skip--> IDLE (complete)
                    AWAITING_PLAYER --back--> AWAITING_POINT_TYPE
                    any --cancel--> IDLE (discarded)
"""

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import AdjustmentPendingError, AttributionStateError
from src.core.shared_types import AttributionStep, PointType, Side


@dataclass(frozen=True)
class PendingAdjustment:
    side: Side
    delta: int
    player_id: Optional[int] = None


@dataclass(frozen=True)
class Attribution:
    """A completed attribution: everything needed to create the point."""

    side: Side
    point_type: PointType
    player_id: Optional[int]


class AttributionFlow:
    """Holds at most one pending adjustment."""

    def __init__(self) -> None:
        self._step = AttributionStep.IDLE
        self._pending: Optional[PendingAdjustment] = None
        self._point_type: Optional[PointType] = None

    @property
    def step(self) -> AttributionStep:
        return self._step

    @property
    def pending(self) -> Optional[PendingAdjustment]:
        return self._pending

    @property
    def selected_point_type(self) -> Optional[PointType]:
        return self._point_type

    @property
    def is_idle(self) -> bool:
        return self._step == AttributionStep.IDLE

    def begin(self, side: Side, delta: int, player_id: Optional[int] = None) -> None:
        if not self.is_idle:
            raise AdjustmentPendingError(
                f"Cannot stage a point for {side}: an adjustment for {self._pending.side} is still pending."
            )
        if delta <= 0:
            raise AttributionStateError(f"Only increments need attribution, got {delta=}.")
        self._pending = PendingAdjustment(side=side, delta=delta, player_id=player_id)
        self._step = AttributionStep.AWAITING_POINT_TYPE

    def select_point_type(self, point_type: PointType) -> Optional[Attribution]:
        """Returns the completed attribution, or None when a player still has to be picked."""
        self._require(AttributionStep.AWAITING_POINT_TYPE)
        if point_type.requires_player:
            self._point_type = point_type
            self._step = AttributionStep.AWAITING_PLAYER
            return None
        return self._complete(point_type, self._pending.player_id)

    def select_player(self, player_id: Optional[int]) -> Attribution:
        """Pass None to skip attribution: the point is committed without a player."""
        self._require(AttributionStep.AWAITING_PLAYER)
        return self._complete(self._point_type, player_id)

    def back(self) -> None:
        """From player selection back to type selection. The staged side is kept."""
        self._require(AttributionStep.AWAITING_PLAYER)
        self._point_type = None
        self._step = AttributionStep.AWAITING_POINT_TYPE

    def cancel(self) -> Optional[PendingAdjustment]:
        """Discard whatever is pending. Harmless when idle."""
        discarded = self._pending
        self._reset()
        return discarded

    # -- Internal helpers --
    def _complete(self, point_type: PointType, player_id: Optional[int]) -> Attribution:
        attribution = Attribution(
            side=self._pending.side, point_type=point_type, player_id=player_id
        )
        self._reset()
        return attribution

    def _require(self, step: AttributionStep) -> None:
        if self._step != step:
            raise AttributionStateError(
                f"Expected attribution step {step!r}, but current step is {self._step!r}."
            )

    def _reset(self) -> None:
        self._step = AttributionStep.IDLE
        self._pending = None
        self._point_type = None
