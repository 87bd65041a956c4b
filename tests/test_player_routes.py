"""Tests for the player blueprint."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from racketdraw import create_app
from tests.conftest import (
    FIRESTORE_MODULES,
    add_players,
    make_firestore_module,
    make_mock_db,
    patch_mockfirestore,
)

patch_mockfirestore()


class PlayerRoutesTestCase(unittest.TestCase):
    """Test case for the player blueprint."""

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
        self.mock_db.collection("users").document("admin1").set({"role": "admin"})
        self.mock_db.collection("users").document("member1").set({"role": "player"})
        with self.client.session_transaction() as sess:
            sess["user_id"] = "admin1"

    def test_create_player(self) -> None:
        response = self.client.post(
            "/players/",
            json={
                "firstName": "Carlos",
                "lastName": "Alcaraz",
                "email": "carlos@example.com",
                "dominantHand": "right",
            },
        )
        self.assertEqual(response.status_code, 201)
        body = response.get_json()
        self.assertEqual(body["lastName"], "Alcaraz")
        self.assertTrue(body["active"])

    def test_create_player_invalid_email(self) -> None:
        response = self.client.post(
            "/players/",
            json={"firstName": "Carlos", "lastName": "Alcaraz", "email": "nope"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["field"], "email")

    def test_list_and_deactivate(self) -> None:
        add_players(self.mock_db, 2)
        self.assertEqual(len(self.client.get("/players/").get_json()), 2)

        response = self.client.post("/players/p1/deactivate")
        self.assertEqual(response.status_code, 200)
        listed = self.client.get("/players/").get_json()
        self.assertEqual([p["id"] for p in listed], ["p2"])
        self.assertEqual(len(self.client.get("/players/?inactive=1").get_json()), 2)
        self.assertFalse(self.client.get("/players/p1").get_json()["active"])

    def test_edit_player(self) -> None:
        add_players(self.mock_db, 1)
        response = self.client.put(
            "/players/p1",
            json={"firstName": "Player1", "lastName": "P", "racketBrand": "Head"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["racketBrand"], "Head")

    def test_players_are_read_only_for_members(self) -> None:
        with self.client.session_transaction() as sess:
            sess["user_id"] = "member1"
        response = self.client.post(
            "/players/", json={"firstName": "A", "lastName": "B"}
        )
        self.assertEqual(response.status_code, 403)

    def test_missing_player(self) -> None:
        self.assertEqual(self.client.get("/players/ghost").status_code, 404)
