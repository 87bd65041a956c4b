"""Advancing an elimination bracket round by round."""

from __future__ import annotations

from typing import Optional

from racketdraw.errors import RoundIncomplete

from .bracket import new_match
from .models import BYE, Round


def get_round_name(match_count: int) -> str:
    """Get the display name of a round from its number of matches."""
    if match_count == 1:
        return "Final"
    if match_count == 2:  # noqa: PLR2004
        return "Semifinal"
    if match_count == 4:  # noqa: PLR2004
        return "Quarterfinal"
    return f"Round of {match_count * 2}"


def is_final_round(current: Round) -> bool:
    """A round with a single match decides the bracket."""
    return len(current.matches) == 1


def advance_round(current: Round) -> Optional[Round]:
    """Pair the winners of ``current`` into the next round.

    Returns None when ``current`` is the decided final, in which case the
    tournament is ready to be finished rather than advanced.

    Raises:
        RoundIncomplete: If a match of ``current`` has no winner yet.
    """
    if not current.matches:
        raise RoundIncomplete(f"Round {current.number} has no matches.")
    pending = [m for m in current.matches if not m.is_decided]
    if pending:
        raise RoundIncomplete(
            f"Round {current.number} has {len(pending)} match(es) without a winner."
        )

    if is_final_round(current):
        return None

    winners = [m.winner for m in current.matches if m.winner]
    if len(winners) % 2:
        winners.append(BYE)

    matches = [
        new_match(winners[i], winners[i + 1]) for i in range(0, len(winners), 2)
    ]
    return Round(number=current.number + 1, matches=matches)
