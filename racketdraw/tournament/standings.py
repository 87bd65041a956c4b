"""Group standings derived from recorded match results."""

from __future__ import annotations

import random
from typing import Sequence

from racketdraw.errors import UnknownParticipant

from .models import BYE, Group, StandingEntry


def _ordered_members(group: Group) -> list[str]:
    """Members in tie-resolution order: drawn participants first."""
    drawn = [pid for pid in group.tiebreak_order if pid in group.participant_ids]
    return drawn + [pid for pid in group.participant_ids if pid not in drawn]


def compute_standings(group: Group) -> list[StandingEntry]:
    """Rank the group's participants by wins, then sets won, then games won.

    Ties keep member order (after any recorded tie draw).

    Raises:
        UnknownParticipant: If a decided match names someone outside the group.
    """
    table = {pid: StandingEntry(participant_id=pid) for pid in _ordered_members(group)}

    for match in group.matches:
        if not match.is_decided:
            continue
        for slot in (*match.slots, match.winner):
            if slot != BYE and slot not in table:
                raise UnknownParticipant(
                    f"Match {match.id} references participant {slot} "
                    f"outside group {group.name}."
                )
        if match.has_bye:
            table[match.winner].wins += 1
            continue

        entry_a = table[match.slot_a]
        entry_b = table[match.slot_b]
        table[match.winner].wins += 1
        for set_score in match.result.sets:
            entry_a.games_won += set_score.games_a
            entry_b.games_won += set_score.games_b
            side = set_score.winning_side()
            if side == "a":
                entry_a.sets_won += 1
            elif side == "b":
                entry_b.sets_won += 1

    return sorted(table.values(), key=lambda e: e.sort_key, reverse=True)


def pooled_standings(groups: Sequence[Group]) -> list[StandingEntry]:
    """Rank every participant across all groups, groups in order for ties."""
    entries: list[StandingEntry] = []
    for group in groups:
        entries.extend(compute_standings(group))
    return sorted(entries, key=lambda e: e.sort_key, reverse=True)


def tied_with_leader(standings: Sequence[StandingEntry]) -> list[StandingEntry]:
    """Entries level with the first one on every ranking criterion."""
    if not standings:
        return []
    leader_key = standings[0].sort_key
    return [e for e in standings if e.sort_key == leader_key]


def draw_tie_winner(group: Group, rng: random.Random | None = None) -> str | None:
    """Pick one of the participants tied for first place at random.

    Returns the drawn participant id, or None when there is no tie. The caller
    records the draw in ``group.tiebreak_order``.
    """
    tied = tied_with_leader(compute_standings(group))
    if len(tied) < 2:  # noqa: PLR2004
        return None
    chooser = rng or random
    return chooser.choice(tied).participant_id
