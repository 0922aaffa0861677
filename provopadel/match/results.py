"""Set-score validation and the result entry flow."""

from __future__ import annotations

import math
from typing import Any, Callable, Iterable, Optional

from provopadel.constants import MAX_SETS, MIN_SETS, RESULT_EDITABLE_STATUSES
from provopadel.core.types import MatchSet
from provopadel.errors import ApiError, ValidationError

COLLECTING = "collecting"
SUBMITTING = "submitting"
SETTLED = "settled"
FAILED = "failed"

BLANK_SET_ROWS = 3


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_score(value: str) -> float | None:
    if value == "":
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _normalize(number: float) -> int | float:
    return int(number) if number.is_integer() else number


def _row_values(row: Any) -> tuple[str, str]:
    if isinstance(row, dict):
        return _as_text(row.get("a")), _as_text(row.get("b"))
    a, b = row
    return _as_text(a), _as_text(b)


def validate_sets(rows: Iterable[Any]) -> list[MatchSet]:
    """Check raw set rows and return the ``{a, b}`` payload.

    Rows may be ``{"a": ..., "b": ...}`` dicts or ``(a, b)`` pairs of raw
    form values. Raises ValidationError with the first rule that fails.
    """
    filled = [
        (a, b) for a, b in (_row_values(row) for row in rows) if a != "" or b != ""
    ]

    if len(filled) < MIN_SETS:
        raise ValidationError("Tenes que cargar al menos 2 sets.")
    if len(filled) > MAX_SETS:
        raise ValidationError("Maximo 3 sets.")

    payload: list[MatchSet] = []
    for index, (raw_a, raw_b) in enumerate(filled, start=1):
        a = _parse_score(raw_a)
        b = _parse_score(raw_b)
        if a is None or b is None:
            raise ValidationError(f"Set {index} incompleto.")
        if a < 0 or b < 0:
            raise ValidationError(f"Set {index} invalido.")
        if a == b:
            raise ValidationError(f"Set {index} no puede empatar.")
        payload.append({"a": _normalize(a), "b": _normalize(b)})
    return payload


def can_edit_results(tournament_status: Optional[str]) -> bool:
    """Results may be entered only while the tournament is in play."""
    return tournament_status in RESULT_EDITABLE_STATUSES


def initial_set_rows(match: dict[str, Any] | None) -> list[dict[str, str]]:
    """Editable rows prefilled from a match's stored sets, padded to three."""
    rows = [
        {"a": str(s["a"]), "b": str(s["b"])}
        for s in ((match or {}).get("sets") or [])
    ]
    rows.extend({"a": "", "b": ""} for _ in range(BLANK_SET_ROWS))
    return rows[:BLANK_SET_ROWS]


class ResultEntry:
    """One result form: collecting -> submitting -> settled | failed.

    A validation failure leaves the form in ``collecting`` and never reaches
    the network. The winner always comes from the server's response.
    """

    def __init__(self, rows: Iterable[Any]):
        self.rows = list(rows)
        self.state = COLLECTING
        self.error: str | None = None
        self.match: dict[str, Any] | None = None

    def validate(self) -> list[MatchSet] | None:
        try:
            sets = validate_sets(self.rows)
        except ValidationError as e:
            self.state = COLLECTING
            self.error = e.message
            return None
        self.error = None
        return sets

    def submit(
        self, send: Callable[[list[MatchSet]], dict[str, Any]]
    ) -> dict[str, Any] | None:
        """Validate, then hand the sets to ``send`` and keep its match."""
        sets = self.validate()
        if sets is None:
            return None

        self.state = SUBMITTING
        try:
            self.match = send(sets)
        except ApiError as e:
            if e.is_unauthorized:
                raise
            self.state = FAILED
            self.error = e.message
            return None
        self.state = SETTLED
        return self.match
