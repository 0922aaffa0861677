"""Tests for group standings ordering."""

import unittest

from provopadel.group.standings import format_diff, sort_standings, standings_table


def row(team_id, points, sets_for=0, sets_against=0, games_for=0, games_against=0):
    return {
        "team": {"id": team_id, "players": []},
        "points": points,
        "sets_for": sets_for,
        "sets_against": sets_against,
        "games_for": games_for,
        "games_against": games_against,
    }


class StandingsTestCase(unittest.TestCase):
    def test_points_come_first(self):
        rows = [row(1, 2), row(2, 6), row(3, 4)]
        self.assertEqual([r["team"]["id"] for r in sort_standings(rows)], [2, 3, 1])

    def test_set_difference_breaks_point_ties(self):
        rows = [row(1, 4, 4, 3), row(2, 4, 5, 1)]
        self.assertEqual([r["team"]["id"] for r in sort_standings(rows)], [2, 1])

    def test_game_difference_breaks_set_ties(self):
        rows = [row(1, 4, 4, 2, 30, 28), row(2, 4, 4, 2, 32, 20)]
        self.assertEqual([r["team"]["id"] for r in sort_standings(rows)], [2, 1])

    def test_full_ties_keep_api_order(self):
        rows = [row(5, 3, 2, 2, 20, 20), row(4, 3, 2, 2, 20, 20)]
        self.assertEqual([r["team"]["id"] for r in sort_standings(rows)], [5, 4])

    def test_explicit_differences_win_over_counts(self):
        first = dict(row(1, 2, 0, 5), set_diff=3)
        second = row(2, 2, 2, 0)
        self.assertEqual([r["team"]["id"] for r in sort_standings([second, first])], [1, 2])

    def test_table_fills_in_differences(self):
        table = standings_table([row(1, 2, 3, 1, 20, 25)])
        self.assertEqual(table[0]["set_diff"], 2)
        self.assertEqual(table[0]["game_diff"], -5)
        self.assertEqual(standings_table(None), [])

    def test_format_diff(self):
        self.assertEqual(format_diff(3), "+3")
        self.assertEqual(format_diff(0), "0")
        self.assertEqual(format_diff(-2), "-2")


if __name__ == "__main__":
    unittest.main()
