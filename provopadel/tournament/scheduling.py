"""Schedule grid derivation for the tournament schedule page.

The grid is a pure function of the match list and the tournament's
timetable settings. It is rebuilt on every render and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from provopadel.constants import STAGE_ORDER


def parse_time_to_minutes(value: Any) -> int | None:
    """Parse ``HH:MM`` or ``HH:MM:SS`` into minutes since midnight."""
    if not value or not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isascii() and p.isdigit() for p in parts):
        return None
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    return hours * 60 + minutes


def format_minutes(total_minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def is_schedule_configured(tournament: dict[str, Any] | None) -> bool:
    """True when start/end time, duration and courts are all set."""
    if not tournament:
        return False
    return bool(
        tournament.get("start_time")
        and tournament.get("end_time")
        and tournament.get("match_duration_minutes")
        and tournament.get("courts_count")
    )


def _timetable(tournament: dict[str, Any] | None) -> tuple[int, int, int, int] | None:
    """Start, end, duration and courts, or None while not configured."""
    if not tournament or not is_schedule_configured(tournament):
        return None
    start = parse_time_to_minutes(tournament.get("start_time"))
    end = parse_time_to_minutes(tournament.get("end_time"))
    try:
        duration = int(tournament["match_duration_minutes"])
        courts = int(tournament["courts_count"])
    except (TypeError, ValueError):
        return None
    if start is None or end is None or duration <= 0 or courts <= 0:
        return None
    return start, end, duration, courts


def build_time_slots(tournament: dict[str, Any] | None) -> list[int]:
    """Return the ladder of slot start times, in minutes since midnight.

    An empty list means the timetable is not configured yet.
    """
    timetable = _timetable(tournament)
    if timetable is None:
        return []
    start, end, duration, _ = timetable

    slots = []
    t = start
    while t + duration <= end:
        slots.append(t)
        t += duration
    return slots


def stage_sort_key(match: dict[str, Any]) -> tuple[int, int]:
    """Order by stage precedence, then by id."""
    stage = match.get("stage")
    rank = STAGE_ORDER.index(stage) if stage in STAGE_ORDER else len(STAGE_ORDER)
    return rank, match.get("id", 0)


@dataclass
class ScheduleRow:
    """One time slot and the match on each court (or None)."""

    time: int
    matches: list[Optional[dict[str, Any]]]

    @property
    def label(self) -> str:
        return format_minutes(self.time)


@dataclass
class ScheduleGrid:
    """Time slots by courts, plus the matches that did not fit."""

    rows: list[ScheduleRow]
    courts: int
    overflow: int = 0
    match_order: dict[int, int] = field(default_factory=dict)

    def cell(self, row: int, col: int) -> Optional[dict[str, Any]]:
        return self.rows[row].matches[col]

    def display_number(self, match: dict[str, Any]) -> int:
        """Sequence number shown on the card, falling back to the id."""
        return self.match_order.get(match["id"], match["id"])


def _place_exact(
    rows: list[ScheduleRow],
    slot_index: dict[int, int],
    courts: int,
    matches: Iterable[dict[str, Any]],
) -> set[int]:
    placed: set[int] = set()
    for match in matches:
        if not match.get("scheduled_time") or not match.get("court_number"):
            continue
        minutes = parse_time_to_minutes(match["scheduled_time"])
        if minutes is None:
            continue
        row_index = slot_index.get(minutes)
        if row_index is None:
            continue
        court_index = int(match["court_number"]) - 1
        if court_index < 0 or court_index >= courts:
            continue
        # First match to claim a cell keeps it.
        if rows[row_index].matches[court_index] is not None:
            continue
        rows[row_index].matches[court_index] = match
        placed.add(match["id"])
    return placed


def _fill_empty(rows: list[ScheduleRow], remaining: list[dict[str, Any]]) -> int:
    """Pour matches into empty cells row by row; return how many were used."""
    used = 0
    for row in rows:
        for court_index, current in enumerate(row.matches):
            if used >= len(remaining):
                return used
            if current is None:
                row.matches[court_index] = remaining[used]
                used += 1
    return used


def _number_matches(rows: list[ScheduleRow]) -> dict[int, int]:
    order: dict[int, int] = {}
    for row in rows:
        for match in row.matches:
            if match is not None and match["id"] not in order:
                order[match["id"]] = len(order) + 1
    return order


def build_schedule(
    matches: list[dict[str, Any]], tournament: dict[str, Any] | None
) -> ScheduleGrid | None:
    """Build the schedule grid, or None if the timetable is not configured."""
    timetable = _timetable(tournament)
    if timetable is None:
        return None
    courts = timetable[3]
    slots = build_time_slots(tournament)

    rows = [ScheduleRow(time=t, matches=[None] * courts) for t in slots]
    slot_index = {t: i for i, t in enumerate(slots)}

    placed = _place_exact(rows, slot_index, courts, matches)
    remaining = sorted(
        (m for m in matches if m["id"] not in placed), key=stage_sort_key
    )
    used = _fill_empty(rows, remaining)

    return ScheduleGrid(
        rows=rows,
        courts=courts,
        overflow=len(remaining) - used,
        match_order=_number_matches(rows),
    )


def apply_reschedule(
    matches: list[dict[str, Any]], response: dict[str, Any]
) -> list[dict[str, Any]]:
    """Apply a ``{updated, swapped}`` schedule response to a match list.

    Both replacements are applied by id before the list is returned. The swap
    partner is only ever taken from the response.
    """
    result = list(matches)
    for replacement in (response.get("updated"), response.get("swapped")):
        if replacement:
            result = replace_match(result, replacement)
    return result


def replace_match(
    matches: list[dict[str, Any]], updated: dict[str, Any]
) -> list[dict[str, Any]]:
    """Replace one match by id with the server's copy."""
    return [updated if m["id"] == updated["id"] else m for m in matches]
