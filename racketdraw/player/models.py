"""Data models for the player blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from racketdraw.core.types import FirestoreDocument


class MatchHistoryEntry(TypedDict, total=False):
    """An entry of a player's chronological history."""

    type: str  # "match" or "achievement"
    tournamentId: str
    opponent: str
    result: str
    position: int
    date: Any


class Player(FirestoreDocument, total=False):
    """A player document in Firestore."""

    firstName: str
    lastName: str
    email: str
    phone: str
    photo: str
    dominantHand: str
    racketBrand: str
    active: bool
    userId: str
    matches: list[MatchHistoryEntry]


def display_name(player: dict[str, Any] | None) -> str:
    """Return "First Last" for a player document."""
    if not player:
        return "Unknown Player"
    name = f"{player.get('firstName', '')} {player.get('lastName', '')}".strip()
    return name or "Unknown Player"
