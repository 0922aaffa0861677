"""Service layer for match scheduling and results."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from provopadel.api import ApiClient
from provopadel.constants import MATCH_PENDING, MATCH_PLAYED, SCHEDULE_MINUTES
from provopadel.tournament.scheduling import (
    apply_reschedule,
    build_time_slots,
    format_minutes,
    parse_time_to_minutes,
)

from .results import ResultEntry

logger = logging.getLogger(__name__)


class MatchService:
    """Forwards match mutations to the API and reconciles its answers."""

    @staticmethod
    def start(api: ApiClient, match_id: int) -> dict[str, Any]:
        return api.post(f"/matches/{match_id}/start")

    @staticmethod
    def reschedule(
        api: ApiClient,
        match_id: int,
        scheduled_time: str,
        court_number: int,
        scheduled_date: str | None = None,
    ) -> dict[str, Any]:
        """Ask for a new slot; the response is ``{updated, swapped}``."""
        body: dict[str, Any] = {
            "scheduled_time": scheduled_time,
            "court_number": court_number,
        }
        if scheduled_date:
            body["scheduled_date"] = scheduled_date
        return api.post(f"/matches/{match_id}/schedule", body)

    @staticmethod
    def submit_result(api: ApiClient, match_id: int, entry: ResultEntry) -> dict[str, Any] | None:
        """Validate and send a result; returns the server's match on success."""
        return entry.submit(
            lambda sets: api.post(f"/matches/{match_id}/result", {"sets": sets})
        )

    @staticmethod
    def parse_drop(
        payload: Any, tournament: dict[str, Any] | None = None
    ) -> tuple[int, str, int] | None:
        """Read ``{match_id, time, court}`` from a drop, or None if malformed.

        With a tournament, the time must be one of its slots and the court
        one of its courts.
        """
        if not isinstance(payload, dict):
            return None
        try:
            match_id = int(payload["match_id"])
            court = int(payload["court"])
        except (KeyError, TypeError, ValueError):
            return None
        minutes = parse_time_to_minutes(payload.get("time"))
        if minutes is None or court < 1:
            return None
        if tournament is not None:
            if minutes not in build_time_slots(tournament):
                return None
            if court > int(tournament["courts_count"]):
                return None
        return match_id, format_minutes(minutes), court

    @staticmethod
    def handle_drop(
        api: ApiClient,
        matches: list[dict[str, Any]],
        payload: Any,
        tournament: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]] | None:
        """Reschedule the dropped match and return the reconciled list.

        Malformed payloads, cells outside the grid, unknown ids and matches
        that are not pending are ignored and return None without calling the
        API.
        """
        parsed = MatchService.parse_drop(payload, tournament)
        if parsed is None:
            logger.debug(f"Ignoring malformed drop payload: {payload!r}")
            return None
        match_id, scheduled_time, court = parsed

        match = next((m for m in matches if m["id"] == match_id), None)
        if match is None or match.get("status") != MATCH_PENDING:
            logger.debug(f"Ignoring drop of match {match_id}")
            return None

        response = MatchService.reschedule(api, match_id, scheduled_time, court)
        return apply_reschedule(matches, response or {})

    @staticmethod
    def split_tabs(
        matches: list[dict[str, Any]],
    ) -> dict[str, list[dict[str, Any]]]:
        """Unscheduled, scheduled and played matches, each ordered by id."""
        tabs: dict[str, list[dict[str, Any]]] = {
            "unscheduled": [],
            "scheduled": [],
            "played": [],
        }
        for match in sorted(matches, key=lambda m: m["id"]):
            if match.get("status") == MATCH_PLAYED:
                tabs["played"].append(match)
            elif match.get("scheduled_time"):
                tabs["scheduled"].append(match)
            else:
                tabs["unscheduled"].append(match)
        return tabs

    @staticmethod
    def schedule_defaults(match: dict[str, Any]) -> dict[str, Any]:
        """Initial schedule form values for a match."""
        minutes = parse_time_to_minutes(match.get("scheduled_time"))
        hour = minute = ""
        if minutes is not None:
            hour, minute = format_minutes(minutes).split(":")
        scheduled_date = None
        if match.get("scheduled_date"):
            try:
                scheduled_date = date.fromisoformat(match["scheduled_date"][:10])
            except ValueError:
                scheduled_date = None
        return {
            "scheduled_date": scheduled_date,
            "hour": hour,
            "minute": minute if minute in SCHEDULE_MINUTES else "",
            "court_number": match.get("court_number") or 1,
        }
