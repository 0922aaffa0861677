"""Tests for the group standings page."""

import unittest

from tests.conftest import FakeApi, login_session, make_app, make_team


class GroupStandingsTestCase(unittest.TestCase):
    def setUp(self):
        self.api = FakeApi()
        self.app = make_app(self.api)
        self.client = self.app.test_client()
        login_session(self.client)

    def test_table_is_sorted_and_back_link_is_kept(self):
        self.api.on(
            "GET",
            "/groups/10/standings",
            {
                "group_id": 10,
                "group_name": "Zona A",
                "standings": [
                    {"team": make_team(1, "Ana", "Bea"), "points": 1, "sets_for": 1, "sets_against": 2},
                    {"team": make_team(2, "Caro", "Dani"), "points": 2, "sets_for": 2, "sets_against": 1},
                ],
            },
        )
        html = self.client.get("/groups/10/standings?back=/tournaments/1").data.decode()
        self.assertIn("Zona A", html)
        self.assertLess(html.index("Caro / Dani"), html.index("Ana / Bea"))
        self.assertIn('href="/tournaments/1"', html)

    def test_offsite_back_link_is_dropped(self):
        self.api.on("GET", "/groups/10/standings", {"group_id": 10, "group_name": "Zona A", "standings": []})
        html = self.client.get("/groups/10/standings?back=https://evil.example").data.decode()
        self.assertNotIn("evil.example", html)
        self.assertIn("Sin partidos jugados todavia.", html)


if __name__ == "__main__":
    unittest.main()
