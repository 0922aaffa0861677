"""Tests for the schedule grid and reschedule reconciliation."""

import unittest

from provopadel.tournament.scheduling import (
    apply_reschedule,
    build_schedule,
    build_time_slots,
    format_minutes,
    parse_time_to_minutes,
    replace_match,
    stage_sort_key,
)
from tests.conftest import make_match, make_tournament


class TimeSlotTestCase(unittest.TestCase):
    def test_parse_time_accepts_seconds(self):
        self.assertEqual(parse_time_to_minutes("09:30"), 570)
        self.assertEqual(parse_time_to_minutes("09:30:00"), 570)

    def test_parse_time_rejects_garbage(self):
        self.assertIsNone(parse_time_to_minutes(None))
        self.assertIsNone(parse_time_to_minutes("930"))
        self.assertIsNone(parse_time_to_minutes("ab:cd"))

    def test_parse_time_rejects_out_of_range_parts(self):
        for value in ("09:75", "99:99", "-1:30", "24:00", "09:30:60", "1:2:3:4"):
            self.assertIsNone(parse_time_to_minutes(value), value)
        self.assertEqual(parse_time_to_minutes("23:59:59"), 1439)

    def test_non_numeric_duration_has_no_slots(self):
        self.assertEqual(build_time_slots(make_tournament(match_duration_minutes="x")), [])

    def test_format_minutes_pads(self):
        self.assertEqual(format_minutes(545), "09:05")

    def test_slots_stop_when_a_match_no_longer_fits(self):
        tournament = make_tournament(start_time="09:00", end_time="11:30", match_duration_minutes=60)
        self.assertEqual(build_time_slots(tournament), [540, 600])

    def test_slots_include_a_match_ending_exactly_at_close(self):
        tournament = make_tournament(start_time="09:00", end_time="12:00", match_duration_minutes=60)
        self.assertEqual(build_time_slots(tournament), [540, 600, 660])

    def test_unconfigured_timetable_has_no_slots(self):
        self.assertEqual(build_time_slots(make_tournament(courts_count=None)), [])
        self.assertEqual(build_time_slots(make_tournament(match_duration_minutes=0)), [])
        self.assertEqual(build_time_slots(None), [])

    def test_end_before_start_has_no_slots(self):
        tournament = make_tournament(start_time="12:00", end_time="09:00")
        self.assertEqual(build_time_slots(tournament), [])


class ScheduleGridTestCase(unittest.TestCase):
    def test_not_configured_returns_none(self):
        self.assertIsNone(build_schedule([make_match(1)], make_tournament(start_time=None)))

    def test_scheduled_match_lands_in_its_cell(self):
        grid = build_schedule(
            [make_match(1, scheduled_time="10:00:00", court_number=2)], make_tournament()
        )
        self.assertEqual(grid.courts, 2)
        self.assertEqual(len(grid.rows), 3)
        self.assertEqual(grid.cell(1, 1)["id"], 1)
        self.assertIsNone(grid.cell(0, 0))

    def test_unplaced_matches_fill_empty_cells_by_stage_then_id(self):
        matches = [
            make_match(9, stage="final", group_id=None),
            make_match(4),
            make_match(2),
            make_match(1, scheduled_time="09:00", court_number=1),
        ]
        grid = build_schedule(matches, make_tournament())
        self.assertEqual(grid.cell(0, 0)["id"], 1)
        self.assertEqual(grid.cell(0, 1)["id"], 2)
        self.assertEqual(grid.cell(1, 0)["id"], 4)
        self.assertEqual(grid.cell(1, 1)["id"], 9)
        self.assertEqual(grid.overflow, 0)

    def test_cell_conflict_keeps_first_and_pours_the_other(self):
        matches = [
            make_match(1, scheduled_time="09:00", court_number=1),
            make_match(2, scheduled_time="09:00", court_number=1),
        ]
        grid = build_schedule(matches, make_tournament())
        self.assertEqual(grid.cell(0, 0)["id"], 1)
        self.assertEqual(grid.cell(0, 1)["id"], 2)

    def test_out_of_range_court_and_time_are_repoured(self):
        matches = [
            make_match(1, scheduled_time="09:00", court_number=5),
            make_match(2, scheduled_time="09:15", court_number=1),
        ]
        grid = build_schedule(matches, make_tournament())
        self.assertEqual(grid.cell(0, 0)["id"], 1)
        self.assertEqual(grid.cell(0, 1)["id"], 2)

    def test_overflow_counts_matches_without_a_cell(self):
        tournament = make_tournament(end_time="10:00", courts_count=1)
        grid = build_schedule([make_match(i) for i in range(1, 4)], tournament)
        self.assertEqual(len(grid.rows), 1)
        self.assertEqual(grid.overflow, 2)

    def test_display_numbers_follow_grid_order(self):
        matches = [
            make_match(30, scheduled_time="09:00", court_number=2),
            make_match(10, scheduled_time="10:00", court_number=1),
            make_match(20, scheduled_time="09:00", court_number=1),
        ]
        grid = build_schedule(matches, make_tournament())
        self.assertEqual(grid.display_number(matches[2]), 1)
        self.assertEqual(grid.display_number(matches[0]), 2)
        self.assertEqual(grid.display_number(matches[1]), 3)
        self.assertEqual(grid.display_number(make_match(99)), 99)

    def test_stage_sort_key_orders_group_before_playoffs(self):
        matches = [make_match(1, stage="semi"), make_match(5), make_match(3, stage="quarter")]
        self.assertEqual([m["id"] for m in sorted(matches, key=stage_sort_key)], [5, 3, 1])


class RescheduleReconcileTestCase(unittest.TestCase):
    def setUp(self):
        self.matches = [
            make_match(1, scheduled_time="09:00", court_number=1),
            make_match(2, scheduled_time="10:00", court_number=1),
            make_match(3),
        ]

    def test_move_to_empty_cell_replaces_one_match(self):
        updated = make_match(3, scheduled_time="11:00", court_number=2)
        result = apply_reschedule(self.matches, {"updated": updated, "swapped": None})
        self.assertEqual(result[2], updated)
        self.assertEqual(result[:2], self.matches[:2])

    def test_swap_replaces_both_matches_from_the_response(self):
        updated = make_match(1, scheduled_time="10:00", court_number=1)
        swapped = make_match(2, scheduled_time="09:00", court_number=1)
        result = apply_reschedule(self.matches, {"updated": updated, "swapped": swapped})
        self.assertEqual(result[0]["scheduled_time"], "10:00")
        self.assertEqual(result[1]["scheduled_time"], "09:00")
        self.assertEqual(result[2], self.matches[2])

    def test_original_list_is_not_mutated(self):
        apply_reschedule(self.matches, {"updated": make_match(3, court_number=2)})
        self.assertIsNone(self.matches[2]["court_number"])

    def test_replace_match_by_id(self):
        played = make_match(2, status="played", sets=[{"a": 6, "b": 1}, {"a": 6, "b": 2}])
        result = replace_match(self.matches, played)
        self.assertEqual(result[1]["status"], "played")
        self.assertEqual(len(result), 3)


if __name__ == "__main__":
    unittest.main()
