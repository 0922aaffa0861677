"""Tests for set validation and the result entry flow."""

import unittest

from provopadel.errors import ApiError, ValidationError
from provopadel.match.results import (
    COLLECTING,
    FAILED,
    SETTLED,
    ResultEntry,
    can_edit_results,
    initial_set_rows,
    validate_sets,
)


class ValidateSetsTestCase(unittest.TestCase):
    def assertRejected(self, rows, message):
        with self.assertRaises(ValidationError) as ctx:
            validate_sets(rows)
        self.assertEqual(ctx.exception.message, message)

    def test_two_sets_are_accepted(self):
        self.assertEqual(
            validate_sets([("6", "4"), ("6", "3"), ("", "")]),
            [{"a": 6, "b": 4}, {"a": 6, "b": 3}],
        )

    def test_dict_rows_are_accepted(self):
        self.assertEqual(
            validate_sets([{"a": 7, "b": 6}, {"a": "4", "b": "6"}, {"a": 10, "b": 8}]),
            [{"a": 7, "b": 6}, {"a": 4, "b": 6}, {"a": 10, "b": 8}],
        )

    def test_blank_rows_in_the_middle_are_ignored(self):
        self.assertEqual(len(validate_sets([("6", "4"), ("", ""), ("3", "6")])), 2)

    def test_fewer_than_two_sets(self):
        self.assertRejected([("6", "4"), ("", "")], "Tenes que cargar al menos 2 sets.")

    def test_more_than_three_sets(self):
        rows = [("6", "4"), ("4", "6"), ("6", "2"), ("6", "1")]
        self.assertRejected(rows, "Maximo 3 sets.")

    def test_half_filled_set(self):
        self.assertRejected([("6", "4"), ("6", "")], "Set 2 incompleto.")

    def test_non_numeric_score(self):
        self.assertRejected([("seis", "4"), ("6", "3")], "Set 1 incompleto.")

    def test_negative_score(self):
        self.assertRejected([("6", "4"), ("-1", "6")], "Set 2 invalido.")

    def test_tied_set(self):
        self.assertRejected([("6", "6"), ("6", "3")], "Set 1 no puede empatar.")


class ResultEntryTestCase(unittest.TestCase):
    def test_invalid_sets_never_reach_the_network(self):
        calls = []
        entry = ResultEntry([("6", "4")])
        self.assertIsNone(entry.submit(calls.append))
        self.assertEqual(calls, [])
        self.assertEqual(entry.state, COLLECTING)
        self.assertEqual(entry.error, "Tenes que cargar al menos 2 sets.")

    def test_success_keeps_the_server_match(self):
        server_match = {"id": 7, "status": "played", "winner_team_id": 2}
        entry = ResultEntry([("4", "6"), ("3", "6")])
        self.assertEqual(entry.submit(lambda sets: server_match), server_match)
        self.assertEqual(entry.state, SETTLED)

    def test_api_failure_is_kept_on_the_entry(self):
        def send(sets):
            raise ApiError("Partido no encontrado", 404)

        entry = ResultEntry([("6", "4"), ("6", "4")])
        self.assertIsNone(entry.submit(send))
        self.assertEqual(entry.state, FAILED)
        self.assertEqual(entry.error, "Partido no encontrado")

    def test_unauthorized_propagates(self):
        def send(sets):
            raise ApiError("Unauthorized", 401)

        entry = ResultEntry([("6", "4"), ("6", "4")])
        with self.assertRaises(ApiError):
            entry.submit(send)


class ResultHelpersTestCase(unittest.TestCase):
    def test_results_editable_only_while_in_play(self):
        self.assertTrue(can_edit_results("ongoing"))
        self.assertTrue(can_edit_results("groups_finished"))
        self.assertFalse(can_edit_results("upcoming"))
        self.assertFalse(can_edit_results("finished"))
        self.assertFalse(can_edit_results(None))

    def test_initial_rows_are_padded_to_three(self):
        rows = initial_set_rows({"sets": [{"a": 6, "b": 2}]})
        self.assertEqual(rows, [{"a": "6", "b": "2"}, {"a": "", "b": ""}, {"a": "", "b": ""}])
        self.assertEqual(len(initial_set_rows(None)), 3)


if __name__ == "__main__":
    unittest.main()
