"""Set and match scoring rules for tennis and padel.

Pure functions: nothing here reads or writes storage.
"""

from __future__ import annotations

import enum
from typing import Optional, Sequence

from racketdraw.constants import (
    DEFAULT_MATCH_TIEBREAK_POINTS,
    DEFAULT_SET_TIEBREAK_POINTS,
    MIN_TIEBREAK_MARGIN,
)
from racketdraw.errors import NoDecision

from .models import MatchTiebreak, SetScore


class SetValidation(str, enum.Enum):
    """Outcome of validating a single set."""

    VALID = "Valid"
    INVALID_SCORELINE = "InvalidScoreline"
    MISSING_TIEBREAK = "MissingTiebreak"


def is_valid_tiebreak(
    points_a: Optional[int], points_b: Optional[int], target: int
) -> bool:
    """A tiebreak is won by reaching ``target`` points with a two point lead."""
    if points_a is None or points_b is None:
        return False
    if points_a < 0 or points_b < 0:
        return False
    if max(points_a, points_b) < target:
        return False
    return abs(points_a - points_b) >= MIN_TIEBREAK_MARGIN


def validate_set(
    set_score: SetScore,
    games_per_set: int,
    tiebreak_points: int = DEFAULT_SET_TIEBREAK_POINTS,
) -> SetValidation:
    """Check a set against standard scoring for a ``games_per_set`` set.

    A set is won 6-4 or better, 7-5, or at 6-6 through a tiebreak (for
    ``games_per_set`` = 6).
    """
    games_a, games_b = set_score.games_a, set_score.games_b
    if games_a < 0 or games_b < 0:
        return SetValidation.INVALID_SCORELINE

    if games_a == games_b == games_per_set:
        if is_valid_tiebreak(
            set_score.tiebreak_a, set_score.tiebreak_b, tiebreak_points
        ):
            return SetValidation.VALID
        return SetValidation.MISSING_TIEBREAK

    # Tiebreak points only belong on a tied set.
    if set_score.tiebreak_a is not None or set_score.tiebreak_b is not None:
        return SetValidation.INVALID_SCORELINE

    high, low = max(games_a, games_b), min(games_a, games_b)
    if high == games_per_set and high - low >= MIN_TIEBREAK_MARGIN:
        return SetValidation.VALID
    if high == games_per_set + 1 and low == games_per_set - 1:
        return SetValidation.VALID
    return SetValidation.INVALID_SCORELINE


def validate_match_tiebreak(
    match_tiebreak: Optional[MatchTiebreak],
    points: int = DEFAULT_MATCH_TIEBREAK_POINTS,
) -> bool:
    """Return True when ``match_tiebreak`` is a completed deciding tiebreak."""
    if match_tiebreak is None:
        return False
    return is_valid_tiebreak(match_tiebreak.points_a, match_tiebreak.points_b, points)


def count_sets(sets: Sequence[SetScore]) -> tuple[int, int]:
    """Return the number of sets won by each side."""
    won_a = won_b = 0
    for set_score in sets:
        side = set_score.winning_side()
        if side == "a":
            won_a += 1
        elif side == "b":
            won_b += 1
    return won_a, won_b


def is_split(sets: Sequence[SetScore], sets_per_match: int) -> bool:
    """True when a two-set match ended one set all."""
    won_a, won_b = count_sets(sets)
    return sets_per_match == 2 and won_a == won_b == 1


def determine_match_winner(  # noqa: PLR0913
    sets: Sequence[SetScore],
    slot_a: str,
    slot_b: str,
    sets_per_match: int,
    match_tiebreak: Optional[MatchTiebreak] = None,
    match_tiebreak_points: int = DEFAULT_MATCH_TIEBREAK_POINTS,
) -> str:
    """Return the slot that won the match.

    Raises:
        NoDecision: If the sets and match tiebreak do not decide a winner.
    """
    won_a, won_b = count_sets(sets)
    if won_a * 2 > sets_per_match:
        return slot_a
    if won_b * 2 > sets_per_match:
        return slot_b

    if is_split(sets, sets_per_match):
        if match_tiebreak is None or not validate_match_tiebreak(
            match_tiebreak, match_tiebreak_points
        ):
            raise NoDecision(
                f"A one set all match needs a match tiebreak won by "
                f"{MIN_TIEBREAK_MARGIN} points, first to {match_tiebreak_points}.",
                field="matchTiebreak",
            )
        if match_tiebreak.points_a > match_tiebreak.points_b:
            return slot_a
        return slot_b

    raise NoDecision()
