"""Round-robin group generation."""

from __future__ import annotations

import random
import string
from typing import Sequence

from racketdraw.constants import MIN_PARTICIPANTS
from racketdraw.core.ids import new_id
from racketdraw.errors import ValidationError

from .bracket import new_match, order_entrants
from .models import BYE, Group, Match


def generate_round_robin(participant_ids: Sequence[str]) -> list[Match]:
    """Generate round robin pairings using the circle method."""
    if len(participant_ids) < MIN_PARTICIPANTS:
        return []

    ids = list(participant_ids)
    if len(ids) % 2 != 0:
        ids.append(BYE)

    num_participants = len(ids)
    num_rounds = num_participants - 1
    matches = []

    for _ in range(num_rounds):
        for i in range(num_participants // 2):
            p1 = ids[i]
            p2 = ids[num_participants - 1 - i]
            if p1 != BYE and p2 != BYE:
                matches.append(new_match(p1, p2))
        # Rotate ids: keep the first element fixed, rotate others
        ids = [ids[0], ids[-1]] + ids[1:-1]

    return matches


def group_name(index: int) -> str:
    """Group A, Group B, ..., Group Z, Group 27, ..."""
    if index < len(string.ascii_uppercase):
        return f"Group {string.ascii_uppercase[index]}"
    return f"Group {index + 1}"


def build_groups(
    participant_ids: Sequence[str],
    seeded_ids: Sequence[str] = (),
    group_count: int = 1,
    rng: random.Random | None = None,
) -> list[Group]:
    """Split participants into ``group_count`` groups and pair everyone within each.

    Participants are dealt in snake order (A, B, B, A, ...) from the
    seeded-first list, so seeds land in different groups.

    Raises:
        ValidationError: If a group would have fewer than two participants.
    """
    if group_count < 1:
        raise ValidationError("There must be at least one group.", field="groupCount")
    if len(participant_ids) < group_count * MIN_PARTICIPANTS:
        raise ValidationError(
            f"{len(participant_ids)} participants cannot fill {group_count} "
            f"groups of at least {MIN_PARTICIPANTS}.",
            field="groupCount",
        )

    entrants = order_entrants(participant_ids, seeded_ids, rng)
    members: list[list[str]] = [[] for _ in range(group_count)]
    for position, pid in enumerate(entrants):
        lap, offset = divmod(position, group_count)
        index = offset if lap % 2 == 0 else group_count - 1 - offset
        members[index].append(pid)

    return [
        Group(
            id=new_id(),
            name=group_name(index),
            participant_ids=ids,
            matches=generate_round_robin(ids),
        )
        for index, ids in enumerate(members)
    ]
