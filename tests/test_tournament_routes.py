"""Tests for the tournament blueprint using mockfirestore."""

from __future__ import annotations

import unittest
from typing import Any
from unittest.mock import patch

from racketdraw import create_app
from racketdraw.utils import EmailError
from tests.conftest import (
    FIRESTORE_MODULES,
    add_players,
    make_firestore_module,
    make_mock_db,
    patch_mockfirestore,
)

patch_mockfirestore()

COACH_ID = "coach1"
PLAYER_USER_ID = "member1"


class TournamentRoutesTestCase(unittest.TestCase):
    """Test case for the tournament blueprint."""

    def setUp(self) -> None:
        """Set up a test client and a mock Firestore."""
        self.mock_db, _ = make_mock_db()
        module = make_firestore_module(self.mock_db)
        for target in FIRESTORE_MODULES:
            patcher = patch(target, new=module)
            patcher.start()
            self.addCleanup(patcher.stop)

        self.app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})
        self.client = self.app.test_client()

        self.mock_db.collection("users").document(COACH_ID).set(
            {"name": "Coach", "role": "coach"}
        )
        self.mock_db.collection("users").document(PLAYER_USER_ID).set(
            {"name": "Member", "role": "player"}
        )
        self.player_ids = add_players(self.mock_db, 4)

    def login(self, user_id: str = COACH_ID) -> None:
        with self.client.session_transaction() as sess:
            sess["user_id"] = user_id

    def create_tournament(self, **overrides: Any) -> dict[str, Any]:
        payload = {
            "name": "Spring Open",
            "type": "RoundRobin",
            "sport": "Tennis",
            "mode": "Singles",
            "groupCount": 1,
            "participants": [{"playerIds": [pid]} for pid in self.player_ids],
        }
        payload.update(overrides)
        response = self.client.post("/tournaments/", json=payload)
        self.assertEqual(response.status_code, 201, response.get_json())
        return response.get_json()

    def put_result(
        self, tournament_id: str, match: dict[str, Any], winner: str, **extra: Any
    ) -> Any:
        sets = (
            [{"gamesA": 6, "gamesB": 3}, {"gamesA": 6, "gamesB": 4}]
            if winner == match["slotA"]
            else [{"gamesA": 3, "gamesB": 6}, {"gamesA": 4, "gamesB": 6}]
        )
        payload = {"sets": sets, "winner": winner, **extra}
        return self.client.put(
            f"/tournaments/{tournament_id}/matches/{match['id']}/result", json=payload
        )

    def test_requires_login(self) -> None:
        response = self.client.get("/tournaments/")
        self.assertEqual(response.status_code, 401)

    def test_players_cannot_create(self) -> None:
        self.login(PLAYER_USER_ID)
        response = self.client.post("/tournaments/", json={"name": "x"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json()["error"], "forbidden")

    def test_create_and_view(self) -> None:
        self.login()
        created = self.create_tournament()
        self.assertEqual(created["status"], "Pending")
        self.assertEqual(len(created["groups"]), 1)
        self.assertEqual(len(created["groups"][0]["matches"]), 6)

        self.login(PLAYER_USER_ID)
        response = self.client.get(f"/tournaments/{created['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["name"], "Spring Open")

        standings = self.client.get(f"/tournaments/{created['id']}/standings").get_json()
        self.assertEqual(standings["groups"][0]["name"], "Group A")
        self.assertEqual(len(standings["groups"][0]["standings"]), 4)

    def test_create_validation_error(self) -> None:
        self.login()
        response = self.client.post(
            "/tournaments/",
            json={"name": "Spring Open", "type": "RoundRobin", "setsPerMatch": 3},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["field"], "setsPerMatch")

    def test_create_with_unknown_player(self) -> None:
        self.login()
        response = self.client.post(
            "/tournaments/",
            json={
                "name": "Spring Open",
                "type": "Elimination",
                "participants": [{"playerIds": ["p1"]}, {"playerIds": ["ghost"]}],
            },
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.get_json()["error"], "unknown_player")

    def test_draft_is_hidden(self) -> None:
        self.login()
        created = self.create_tournament(draft=True)
        self.login(PLAYER_USER_ID)
        response = self.client.get(f"/tournaments/{created['id']}")
        self.assertEqual(response.status_code, 403)

        self.login()
        self.client.post(f"/tournaments/{created['id']}/publish")
        self.login(PLAYER_USER_ID)
        response = self.client.get(f"/tournaments/{created['id']}")
        self.assertEqual(response.status_code, 200)

    def test_submit_result(self) -> None:
        self.login()
        created = self.create_tournament()
        match = created["groups"][0]["matches"][0]

        response = self.put_result(created["id"], match, match["slotB"])
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["status"], "InProgress")
        self.assertEqual(body["version"], 1)
        self.assertEqual(body["groups"][0]["standings"][0]["participantId"], match["slotB"])

    def test_submit_invalid_set(self) -> None:
        self.login()
        created = self.create_tournament()
        match = created["groups"][0]["matches"][0]
        response = self.client.put(
            f"/tournaments/{created['id']}/matches/{match['id']}/result",
            json={
                "sets": [{"gamesA": 6, "gamesB": 3}, {"gamesA": 6, "gamesB": 6}],
                "winner": match["slotA"],
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["field"], "sets[1].tiebreak")

    def test_submit_winner_mismatch(self) -> None:
        self.login()
        created = self.create_tournament()
        match = created["groups"][0]["matches"][0]
        response = self.client.put(
            f"/tournaments/{created['id']}/matches/{match['id']}/result",
            json={
                "sets": [{"gamesA": 6, "gamesB": 3}, {"gamesA": 6, "gamesB": 4}],
                "winner": match["slotB"],
            },
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()["error"], "winner_mismatch")

    def test_submit_with_stale_version(self) -> None:
        self.login()
        created = self.create_tournament()
        first, second = created["groups"][0]["matches"][:2]
        self.put_result(created["id"], first, first["slotA"])
        response = self.put_result(
            created["id"], second, second["slotA"], expectedVersion=0
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()["error"], "conflict")

    def test_players_cannot_submit(self) -> None:
        self.login()
        created = self.create_tournament()
        match = created["groups"][0]["matches"][0]
        self.login(PLAYER_USER_ID)
        response = self.put_result(created["id"], match, match["slotA"])
        self.assertEqual(response.status_code, 403)

    def test_knockout_before_groups_complete(self) -> None:
        self.login()
        created = self.create_tournament()
        response = self.client.post(f"/tournaments/{created['id']}/knockout")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()["error"], "incomplete_group_stage")

    def test_unknown_tournament(self) -> None:
        self.login()
        response = self.client.get("/tournaments/missing")
        self.assertEqual(response.status_code, 404)

    def test_group_stage_to_final(self) -> None:
        self.login()
        created = self.create_tournament(advanceCount=2)
        tournament_id = created["id"]
        for match in created["groups"][0]["matches"]:
            self.assertEqual(
                self.put_result(tournament_id, match, match["slotA"]).status_code, 200
            )

        body = self.client.post(f"/tournaments/{tournament_id}/knockout").get_json()
        final = body["rounds"][0]["matches"][0]
        self.assertEqual(body["bracket"][0]["name"], "Final")

        response = self.put_result(
            tournament_id, final, final["slotA"], runnerUp=final["slotB"]
        )
        self.assertEqual(response.get_json()["winner"], final["slotA"])

        response = self.client.post(f"/tournaments/{tournament_id}/rounds/advance")
        self.assertEqual(response.status_code, 409)

        with patch("racketdraw.tournament.services.send_email") as send_email:
            self.app.config["RESULTS_EMAIL_ENABLED"] = True
            response = self.client.post(f"/tournaments/{tournament_id}/finish")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["status"], "Finished")
        self.assertEqual(send_email.call_count, 4)

        bracket = self.client.get(f"/tournaments/{tournament_id}/bracket").get_json()
        self.assertTrue(bracket["rounds"][0]["complete"])

        listed = self.client.get("/tournaments/?status=Finished").get_json()
        self.assertEqual([t["id"] for t in listed], [tournament_id])

    def test_schedule_match(self) -> None:
        self.login()
        created = self.create_tournament()
        match = created["groups"][0]["matches"][0]
        url = f"/tournaments/{created['id']}/matches/{match['id']}/schedule"

        response = self.client.put(url, json={"scheduledAt": "2024-06-01T10:30:00"})
        self.assertEqual(response.status_code, 200)
        scheduled = response.get_json()["groups"][0]["matches"][0]
        self.assertEqual(scheduled["scheduledAt"], "2024-06-01T10:30:00")

        response = self.client.put(url, json={"scheduledAt": "next tuesday"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["field"], "scheduledAt")

        self.login(PLAYER_USER_ID)
        self.assertEqual(self.client.put(url, json={}).status_code, 403)

    def test_invite(self) -> None:
        self.login()
        created = self.create_tournament()
        with patch("racketdraw.tournament.services.send_email") as send_email:
            response = self.client.post(
                f"/tournaments/{created['id']}/invite",
                json={"email": "guest@example.com"},
            )
        self.assertEqual(response.status_code, 200)
        kwargs = send_email.call_args.kwargs
        self.assertEqual(kwargs["to"], "guest@example.com")
        self.assertTrue(kwargs["link"].endswith(f"/tournaments/{created['id']}"))

    def test_invite_needs_valid_email(self) -> None:
        self.login()
        created = self.create_tournament()
        response = self.client.post(
            f"/tournaments/{created['id']}/invite", json={"email": "not-an-email"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["field"], "email")

    def test_invite_email_failure(self) -> None:
        self.login()
        created = self.create_tournament()
        with patch(
            "racketdraw.tournament.services.send_email",
            side_effect=EmailError("SMTP down"),
        ):
            response = self.client.post(
                f"/tournaments/{created['id']}/invite",
                json={"email": "guest@example.com"},
            )
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.get_json()["error"], "email_failed")
