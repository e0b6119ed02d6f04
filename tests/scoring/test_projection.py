"""Unit tests for src/scoring/projection.py"""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.models import Point
from src.core.shared_types import Side
from src.scoring.projection import (
    ScoreState,
    is_set_complete,
    project,
    running_scores,
)

START = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)


def make_points(sequence: str) -> list[Point]:
    """sequence = "LRRL..." (one letter per rally winner)"""
    return [
        Point(
            winner=Side.LEFT if w == "L" else Side.RIGHT,
            created_at=START + timedelta(seconds=i),
        )
        for i, w in enumerate(sequence)
    ]


def test_empty_log() -> None:
    """No points: nothing scored, first set in progress."""
    assert project([]) == ScoreState(0, 0, 0, 0, 1)


def test_points_within_a_set() -> None:
    state = project(make_points("LLRLR"))
    assert state.left_score == 3
    assert state.right_score == 2
    assert state.left_wins == 0
    assert state.right_wins == 0
    assert state.current_set_number == 1


def test_twenty_five_straight_points_win_the_set() -> None:
    state = project(make_points("L" * 25))
    assert state == ScoreState(
        left_score=0, right_score=0, left_wins=1, right_wins=0, current_set_number=2
    )


def test_twenty_four_points_do_not_win_the_set() -> None:
    state = project(make_points("R" * 24))
    assert state == ScoreState(0, 24, 0, 0, 1)


def test_deuce() -> None:
    """From 24-24 on, the set only ends once one side leads by two (27-25 here)."""
    deuce = "LR" * 24
    assert project(make_points(deuce)) == ScoreState(24, 24, 0, 0, 1)

    # 25-24: advantage of one is not enough
    assert project(make_points(deuce + "L")) == ScoreState(25, 24, 0, 0, 1)
    # 25-25
    assert project(make_points(deuce + "LR")) == ScoreState(25, 25, 0, 0, 1)
    # 26-25
    assert project(make_points(deuce + "LRL")) == ScoreState(26, 25, 0, 0, 1)
    # 27-25: set over
    assert project(make_points(deuce + "LRLL")) == ScoreState(0, 0, 1, 0, 2)


def test_two_point_lead_after_24_all_ends_set() -> None:
    state = project(make_points("L" * 24 + "R" * 24 + "LL"))
    assert state == ScoreState(0, 0, 1, 0, 2)


def test_right_side_wins_a_set() -> None:
    state = project(make_points("L" * 10 + "R" * 25))
    assert state == ScoreState(0, 0, 0, 1, 2)


def test_multiple_sets() -> None:
    sequence = "L" * 25 + "R" * 25 + "L" * 25 + "RRL"
    state = project(make_points(sequence))
    assert state == ScoreState(
        left_score=1, right_score=2, left_wins=2, right_wins=1, current_set_number=4
    )


def test_projection_is_idempotent() -> None:
    points = make_points("LRRLLLR" * 10)
    assert project(points) == project(points)


@pytest.mark.parametrize(
    "sequence",
    [
        "L" * 30,
        "LR" * 40,
        ("LLR" * 20) + ("RRL" * 20),
        ("L" * 24 + "R" * 24 + "LRLRLL") * 2,
    ],
)
def test_running_set_never_satisfies_completion(sequence: str) -> None:
    """At every prefix, the set in progress is never itself complete, and wins count the completed sets."""
    points = make_points(sequence)
    for end in range(len(points) + 1):
        state = project(points[:end])
        assert not is_set_complete(state.left_score, state.right_score)
        assert state.left_wins + state.right_wins == state.current_set_number - 1


def test_fold_uses_log_order() -> None:
    """Points are folded as given, not re-sorted by timestamp."""
    points = make_points("L" * 24 + "R")
    out_of_order = [points[-1]] + points[:-1]
    assert project(out_of_order) == project(points)

    # Order matters once a set boundary is involved
    points = make_points("L" * 25 + "R")
    reordered = [points[-1]] + points[:-1]
    assert project(points) == ScoreState(0, 1, 1, 0, 2)
    assert project(reordered) == ScoreState(0, 0, 1, 0, 2)


@pytest.mark.parametrize(
    "left, right, expected",
    [
        (25, 23, True),
        (23, 25, True),
        (25, 24, False),
        (24, 22, False),
        (30, 28, True),
        (30, 29, False),
        (0, 0, False),
    ],
)
def test_is_set_complete(left: int, right: int, expected: bool) -> None:
    assert is_set_complete(left, right) is expected


@pytest.mark.parametrize(
    "left, right, leader",
    [(0, 0, "Tie"), (3, 1, "Left"), (12, 13, "Right")],
)
def test_leader(left: int, right: int, leader: str) -> None:
    assert ScoreState(left_score=left, right_score=right).leader == leader


def test_running_scores_show_set_ending_score() -> None:
    """The history shows 25-0 next to the set point, then counting restarts in set 2."""
    points = make_points("L" * 25 + "R")
    lines = running_scores(points)

    assert len(lines) == len(points)
    assert [line.point for line in lines] == points
    assert lines[0].score_string == "1-0"
    assert lines[24].score_string == "25-0"
    assert lines[24].completes_set
    assert lines[24].set_number == 1
    assert lines[25].score_string == "0-1"
    assert lines[25].set_number == 2
    assert not lines[25].completes_set


def test_running_scores_of_empty_log() -> None:
    assert running_scores([]) == []
