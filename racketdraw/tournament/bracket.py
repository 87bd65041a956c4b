"""Single elimination bracket generation."""

from __future__ import annotations

import math
import random
from typing import Sequence

from racketdraw.constants import MAX_SEEDS, MIN_PARTICIPANTS
from racketdraw.core.ids import new_id
from racketdraw.errors import IncompleteGroupStage, InsufficientQualifiers

from .models import BYE, Group, Match, Result, Round
from .standings import compute_standings


def calculate_bracket_size(num_entrants: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_entrants <= 1:
        return num_entrants
    return 2 ** math.ceil(math.log2(num_entrants))


def bracket_order(bracket_size: int) -> list[int]:
    """Generate the standard bracket order of 1-based draw positions.

    For 8 positions: [1, 8, 4, 5, 2, 7, 3, 6], giving 1v8, 4v5, 2v7, 3v6, so
    positions 1 and 2 can only meet in the final.
    """
    if bracket_size <= 2:  # noqa: PLR2004
        return [1, 2][:bracket_size]

    upper_half = bracket_order(bracket_size // 2)
    lower_half = [bracket_size + 1 - position for position in upper_half]

    result = []
    for upper, lower in zip(upper_half, lower_half):
        result.extend([upper, lower])
    return result


def new_match(slot_a: str, slot_b: str) -> Match:
    """Create a match; a match against a bye is decided on creation."""
    match = Match(id=new_id(), slot_a=slot_a, slot_b=slot_b)
    if slot_b == BYE and slot_a != BYE:
        match.result = Result(winner=slot_a)
    elif slot_a == BYE and slot_b != BYE:
        match.result = Result(winner=slot_b)
    return match


def order_entrants(
    participant_ids: Sequence[str],
    seeded_ids: Sequence[str] = (),
    rng: random.Random | None = None,
) -> list[str]:
    """Seeded participants first (at most six, in the given order), the rest shuffled."""
    seeds = [pid for pid in seeded_ids if pid in participant_ids]
    seeds = list(dict.fromkeys(seeds))[:MAX_SEEDS]
    rest = [pid for pid in participant_ids if pid not in seeds]
    (rng or random).shuffle(rest)
    return seeds + rest


def build_initial_bracket(
    participant_ids: Sequence[str],
    seeded_ids: Sequence[str] = (),
    rng: random.Random | None = None,
) -> Round:
    """Build round 1 of a bracket, padding to a power of two with byes.

    Draw position ``i`` meets position ``size - 1 - i``, so byes go to the top
    of the ordered list (the seeds first).

    Raises:
        InsufficientQualifiers: If fewer than two participants are given.
    """
    if len(participant_ids) < MIN_PARTICIPANTS:
        raise InsufficientQualifiers()

    entrants = order_entrants(participant_ids, seeded_ids, rng)
    size = calculate_bracket_size(len(entrants))
    positions = entrants + [BYE] * (size - len(entrants))

    order = bracket_order(size)
    matches = [
        new_match(positions[top - 1], positions[bottom - 1])
        for top, bottom in zip(order[0::2], order[1::2])
    ]
    return Round(number=1, matches=matches)


def qualifiers_from_groups(groups: Sequence[Group], advance_count: int) -> list[str]:
    """Pool the top ``advance_count`` participants of every group.

    Raises:
        IncompleteGroupStage: If any group match is still undecided.
    """
    for group in groups:
        if not group.is_complete:
            raise IncompleteGroupStage(
                f"Group {group.name} still has matches without a winner."
            )

    qualifiers: list[str] = []
    for group in groups:
        standings = compute_standings(group)
        qualifiers.extend(entry.participant_id for entry in standings[:advance_count])
    return qualifiers


def build_knockout_from_groups(
    groups: Sequence[Group],
    advance_count: int,
    rng: random.Random | None = None,
) -> Round:
    """Build the first knockout round from the group leaders.

    Group placings are not carried over as seeds.

    Raises:
        IncompleteGroupStage: If any group match is still undecided.
        InsufficientQualifiers: If fewer than two participants qualify.
    """
    qualifiers = qualifiers_from_groups(groups, advance_count)
    if len(qualifiers) < MIN_PARTICIPANTS:
        raise InsufficientQualifiers(
            f"Only {len(qualifiers)} participant(s) qualified from the groups."
        )
    return build_initial_bracket(qualifiers, rng=rng)
