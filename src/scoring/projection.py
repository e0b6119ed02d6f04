"""
Score projection: the current score is never stored, it is computed by replaying the point log.

project() is pure. Call it again after every change to the log instead of patching the previous result.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from src.core.config import MIN_SET_ADVANTAGE, SET_TARGET_POINTS
from src.core.models import Point
from src.core.shared_types import Side

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreState:
    left_score: int = 0
    right_score: int = 0
    left_wins: int = 0
    right_wins: int = 0
    current_set_number: int = 1

    @property
    def leader(self) -> str:
        """'Left', 'Right' or 'Tie' for the set in progress."""
        if self.left_score == self.right_score:
            return "Tie"
        return "Left" if self.left_score > self.right_score else "Right"

    @property
    def completed_sets(self) -> int:
        return self.left_wins + self.right_wins


@dataclass(frozen=True)
class ScoreLine:
    """Set score right after a point was applied (before a set-ending reset)."""

    point: Point
    set_number: int
    left_score: int
    right_score: int
    completes_set: bool

    @property
    def score_string(self) -> str:
        return f"{self.left_score}-{self.right_score}"


def is_set_complete(left_score: int, right_score: int) -> bool:
    has_minimum_score = left_score >= SET_TARGET_POINTS or right_score >= SET_TARGET_POINTS
    has_sufficient_advantage = abs(left_score - right_score) >= MIN_SET_ADVANTAGE
    return has_minimum_score and has_sufficient_advantage


def project(points: Iterable[Point]) -> ScoreState:
    """Fold the points (in the order given) into the current score."""
    left_score = 0
    right_score = 0
    left_wins = 0
    right_wins = 0
    set_number = 1

    for point in points:
        if point.winner == Side.LEFT:
            left_score += 1
        else:
            right_score += 1

        if is_set_complete(left_score, right_score):
            if left_score > right_score:
                left_wins += 1
            else:
                right_wins += 1
            logger.debug(
                "Set %d completed: %s won %d-%d",
                set_number,
                "left" if left_score > right_score else "right",
                left_score,
                right_score,
            )
            set_number += 1
            left_score = 0
            right_score = 0

    return ScoreState(
        left_score=left_score,
        right_score=right_score,
        left_wins=left_wins,
        right_wins=right_wins,
        current_set_number=set_number,
    )


def running_scores(points: Iterable[Point]) -> list[ScoreLine]:
    """Score after every point, e.g. for a history list showing '24-23' next to each rally."""
    lines: list[ScoreLine] = []
    left_score = 0
    right_score = 0
    set_number = 1

    for point in points:
        if point.winner == Side.LEFT:
            left_score += 1
        else:
            right_score += 1

        completes_set = is_set_complete(left_score, right_score)
        lines.append(
            ScoreLine(
                point=point,
                set_number=set_number,
                left_score=left_score,
                right_score=right_score,
                completes_set=completes_set,
            )
        )
        if completes_set:
            set_number += 1
            left_score = 0
            right_score = 0

    return lines
