"""Ordering for group standings tables."""

from __future__ import annotations

from typing import Any


def _diff(row: dict[str, Any], key: str, plus: str, minus: str) -> int:
    value = row.get(key)
    if value is None:
        return row.get(plus, 0) - row.get(minus, 0)
    return value


def standings_key(row: dict[str, Any]) -> tuple[int, int, int]:
    """Points, then set difference, then game difference."""
    return (
        row.get("points", 0),
        _diff(row, "set_diff", "sets_for", "sets_against"),
        _diff(row, "game_diff", "games_for", "games_against"),
    )


def sort_standings(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Sort a standings list, best first.

    The sort is stable, so rows equal on all three keys keep the order the
    API returned them in.
    """
    return sorted(rows, key=standings_key, reverse=True)


def format_diff(value: int) -> str:
    """Render a difference with an explicit sign for positives."""
    return f"+{value}" if value > 0 else str(value)


def standings_table(rows: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """Sorted copies of the rows with both differences filled in."""
    table = []
    for row in sort_standings(rows or []):
        row = dict(row)
        row["set_diff"] = _diff(row, "set_diff", "sets_for", "sets_against")
        row["game_diff"] = _diff(row, "game_diff", "games_for", "games_against")
        table.append(row)
    return table
