"""Tests for identifier normalization and the stored tournament shape."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from racketdraw.core.ids import new_id, normalize_id
from racketdraw.tournament.models import (
    Group,
    Match,
    MatchTiebreak,
    Participant,
    Result,
    Round,
    SetScore,
    Tournament,
    TournamentConfig,
    TournamentStatus,
    TournamentType,
)


class NormalizeIdTestCase(unittest.TestCase):
    """Test case for normalize_id."""

    def test_shapes(self) -> None:
        ref = MagicMock()
        ref.id = "abc"
        self.assertEqual(normalize_id("abc"), "abc")
        self.assertEqual(normalize_id({"$oid": "abc"}), "abc")
        self.assertEqual(normalize_id({"_id": {"$oid": "abc"}}), "abc")
        self.assertEqual(normalize_id({"id": "abc"}), "abc")
        self.assertEqual(normalize_id(ref), "abc")
        self.assertIsNone(normalize_id(None))
        self.assertIsNone(normalize_id(""))
        self.assertIsNone(normalize_id({}))

    def test_unsupported(self) -> None:
        with self.assertRaises(ValueError):
            normalize_id(42)

    def test_new_ids_are_unique(self) -> None:
        self.assertNotEqual(new_id(), new_id())


class TournamentDocumentTestCase(unittest.TestCase):
    """Test case for reading legacy tournament documents."""

    def test_legacy_identifier_shapes(self) -> None:
        data = {
            "name": "Club Open",
            "type": "Elimination",
            "status": "InProgress",
            "creatorId": {"$oid": "coach1"},
            "participants": [
                {"id": {"_id": "t1"}, "playerIds": [{"$oid": "p1"}]},
                {"id": "t2", "playerIds": ["p2"], "seed": True},
            ],
            "rounds": [
                {
                    "number": 1,
                    "matches": [
                        {
                            "id": "m1",
                            "slotA": {"$oid": "t1"},
                            "slotB": "t2",
                            "result": {
                                "sets": [{"gamesA": 6, "gamesB": 6, "tiebreakA": 7, "tiebreakB": 3}],
                                "winner": {"$oid": "t1"},
                            },
                        }
                    ],
                }
            ],
        }
        tournament = Tournament.from_dict("tour1", data)
        self.assertEqual(tournament.creator_id, "coach1")
        self.assertEqual(tournament.participants[0].id, "t1")
        self.assertEqual(tournament.participants[0].player_ids, ["p1"])
        match = tournament.rounds[0].matches[0]
        self.assertEqual(match.slots, ("t1", "t2"))
        self.assertEqual(match.winner, "t1")
        self.assertEqual(match.result.sets[0].tiebreak_a, 7)

    def test_stored_shape(self) -> None:
        tournament = Tournament(
            id="tour1",
            name="Club Open",
            type=TournamentType.ROUND_ROBIN,
            config=TournamentConfig(sport="Padel", mode="Doubles"),
            status=TournamentStatus.IN_PROGRESS,
            participants=[
                Participant(id="t1", player_ids=["a", "b"]),
                Participant(id="t2", player_ids=["c", "d"]),
            ],
            groups=[
                Group(
                    id="g1",
                    name="Group A",
                    participant_ids=["t1", "t2"],
                    matches=[
                        Match(
                            id="m1",
                            slot_a="t1",
                            slot_b="t2",
                            result=Result(
                                sets=[SetScore(6, 4), SetScore(4, 6)],
                                match_tiebreak=MatchTiebreak(10, 8),
                                winner="t1",
                            ),
                        )
                    ],
                )
            ],
            rounds=[Round(number=1)],
        )
        data = tournament.to_dict()
        self.assertEqual(data["status"], "InProgress")
        self.assertEqual(data["participantPlayerIds"], ["a", "b", "c", "d"])
        result = data["groups"][0]["matches"][0]["result"]
        self.assertEqual(result["matchTiebreak"], {"pointsA": 10, "pointsB": 8})
        self.assertEqual(result["sets"][0], {"gamesA": 6, "gamesB": 4})
        self.assertEqual(Tournament.from_dict("tour1", data), tournament)
