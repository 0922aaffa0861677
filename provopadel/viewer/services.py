"""Loading and filtering for the public tournament page."""

from __future__ import annotations

import logging
from typing import Any

from provopadel.api import ApiClient
from provopadel.constants import MATCH_PLAYED
from provopadel.errors import ApiError
from provopadel.group.standings import standings_table
from provopadel.tournament.scheduling import stage_sort_key
from provopadel.utils import division_label, index_by_id, team_label

logger = logging.getLogger(__name__)

ALL_DIVISIONS = "all"


class ViewerService:
    """Public endpoints only; every call is made without a token."""

    @staticmethod
    def load(api: ApiClient, tournament_id: int) -> dict[str, Any]:
        base = f"/public/tournaments/{tournament_id}"
        tournament = api.get(base, auth=False)
        status = (api.get(f"{base}/status", auth=False) or {}).get("status")
        groups = api.get(f"{base}/groups", auth=False) or []
        matches = api.get(f"{base}/matches", auth=False) or []
        teams = api.get(f"{base}/teams", auth=False) or []
        return {
            "tournament": tournament,
            "status": status,
            "groups": groups,
            "matches": matches,
            "teams": teams,
            "standings": ViewerService.load_standings(api, groups),
        }

    @staticmethod
    def load_standings(
        api: ApiClient, groups: list[dict[str, Any]]
    ) -> dict[int, list[dict[str, Any]]]:
        """Sorted tables by group id; a group whose call fails has none."""
        tables = {}
        for group in groups:
            try:
                data = api.get(f"/public/groups/{group['id']}/standings", auth=False)
            except ApiError as e:
                logger.warning(f"No standings for group {group['id']}: {e.message}")
                continue
            if data:
                tables[data.get("group_id", group["id"])] = standings_table(
                    data.get("standings")
                )
        return tables

    @staticmethod
    def divisions(teams: list[dict[str, Any]]) -> list[str]:
        return sorted({d for d in (division_label(t) for t in teams) if d})

    @staticmethod
    def filter_groups(
        groups: list[dict[str, Any]], division: str, query: str
    ) -> list[dict[str, Any]]:
        needle = query.strip().lower()
        result = []
        for group in groups:
            teams = group.get("teams") or []
            if division != ALL_DIVISIONS and not any(
                division_label(t) == division for t in teams
            ):
                continue
            if needle and not any(
                needle in (p.get("name") or "").lower()
                for t in teams
                for p in (t.get("players") or [])
            ):
                continue
            result.append(group)
        return result

    @staticmethod
    def filter_matches(
        matches: list[dict[str, Any]],
        teams: list[dict[str, Any]],
        division: str,
        query: str,
    ) -> list[dict[str, Any]]:
        """Matches whose team labels contain the query, in the division."""
        teams_by_id = index_by_id(teams)
        needle = query.strip().lower()
        result = []
        for match in matches:
            team_a = teams_by_id.get(match.get("team_a_id"))
            team_b = teams_by_id.get(match.get("team_b_id"))
            if needle:
                labels = (
                    team_label(team_a, match.get("team_a_id")).lower(),
                    team_label(team_b, match.get("team_b_id")).lower(),
                )
                if not any(needle in label for label in labels):
                    continue
            if division != ALL_DIVISIONS and division_label(team_a) != division:
                continue
            result.append(match)
        return result

    @staticmethod
    def split_by_status(
        matches: list[dict[str, Any]],
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """Pending and played matches, each by stage precedence then id."""
        ordered = sorted(matches, key=stage_sort_key)
        pending = [m for m in ordered if m.get("status") != MATCH_PLAYED]
        played = [m for m in ordered if m.get("status") == MATCH_PLAYED]
        return pending, played
