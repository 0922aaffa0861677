"""Tests for the organizer's profile and player pages."""

import unittest

from tests.conftest import FakeApi, login_session, make_app


class UserRoutesTestCase(unittest.TestCase):
    def setUp(self):
        self.api = FakeApi()
        self.app = make_app(self.api)
        self.client = self.app.test_client()
        login_session(self.client)

    def flashes(self):
        with self.client.session_transaction() as sess:
            return [message for _, message in sess.get("_flashes", [])]

    def test_players_sorted_by_first_name(self):
        self.api.on(
            "GET",
            "/players",
            [
                {"id": 1, "first_name": "zoe", "last_name": "A", "category": "5ta"},
                {"id": 2, "first_name": "Ana", "last_name": "B", "category": "4ta"},
            ],
        )
        html = self.client.get("/players").data.decode()
        self.assertLess(html.index("<td>Ana</td>"), html.index("<td>zoe</td>"))

    def test_create_player(self):
        self.api.on("POST", "/players", {"id": 3})
        self.client.post(
            "/players", data={"first_name": " Luz ", "last_name": "Diaz", "category": "8va"}
        )
        self.assertEqual(
            self.api.last_json("POST", "/players"),
            {"first_name": "Luz", "last_name": "Diaz", "category": "8va"},
        )
        self.assertEqual(self.flashes(), ["Jugador creado."])

    def test_delete_player_failure_is_flashed(self):
        self.api.on("DELETE", "/players/4", {"detail": "El jugador esta en una pareja"}, status=409)
        self.client.post("/players/4/delete")
        self.assertEqual(self.flashes(), ["El jugador esta en una pareja"])

    def test_profile_update(self):
        self.api.on("GET", "/profile", {"email": "club@example.com", "club_name": "Club Norte"})
        self.api.on("PUT", "/profile", {"club_name": "Club Sur"})
        self.assertIn(b"Club Norte", self.client.get("/profile").data)
        self.client.post("/profile", data={"club_name": "Club Sur", "club_location": ""})
        self.assertEqual(
            self.api.last_json("PUT", "/profile"), {"club_name": "Club Sur", "club_location": None}
        )


if __name__ == "__main__":
    unittest.main()
