"""Service layer for tournament pages."""

from __future__ import annotations

from typing import Any

from provopadel.api import ApiClient
from provopadel.constants import PLAYOFF_STAGES
from provopadel.errors import NotFoundError, ValidationError
from provopadel.utils import team_label

from .teams import TeamRoster


def _blank_to_none(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def first_player(team: dict[str, Any] | None) -> dict[str, Any]:
    players = (team or {}).get("players") or []
    return players[0] if players else {}


class TournamentService:
    """Calls and derivations behind the organizer's tournament pages."""

    @staticmethod
    def list_tournaments(api: ApiClient) -> list[dict[str, Any]]:
        return api.get("/tournaments") or []

    @staticmethod
    def get_tournament(api: ApiClient, tournament_id: int) -> dict[str, Any]:
        """Find one tournament in the organizer's list."""
        for tournament in TournamentService.list_tournaments(api):
            if tournament["id"] == tournament_id:
                return tournament
        raise NotFoundError("Torneo no encontrado.")

    @staticmethod
    def get_status(api: ApiClient, tournament_id: int) -> str | None:
        return (api.get(f"/tournaments/{tournament_id}/status") or {}).get("status")

    @staticmethod
    def get_collection(api: ApiClient, tournament_id: int, name: str) -> list[Any]:
        """Fetch a per-tournament list where 404 means nothing created yet."""
        return api.request_maybe(f"/tournaments/{tournament_id}/{name}") or []

    @staticmethod
    def load_detail(api: ApiClient, tournament_id: int) -> dict[str, Any]:
        tournament = TournamentService.get_tournament(api, tournament_id)
        return {
            "tournament": tournament,
            "status": TournamentService.get_status(api, tournament_id),
            "players": TournamentService.get_collection(api, tournament_id, "players"),
            "teams": TournamentService.get_collection(api, tournament_id, "teams"),
            "groups": TournamentService.get_collection(api, tournament_id, "groups"),
        }

    @staticmethod
    def load_matches_context(api: ApiClient, tournament_id: int) -> dict[str, Any]:
        """Tournament, status, matches, teams and groups for match views."""
        tournament = TournamentService.get_tournament(api, tournament_id)
        return {
            "tournament": tournament,
            "status": TournamentService.get_status(api, tournament_id),
            "matches": TournamentService.get_collection(api, tournament_id, "matches"),
            "teams": TournamentService.get_collection(api, tournament_id, "teams"),
            "groups": TournamentService.get_collection(api, tournament_id, "groups"),
        }

    @staticmethod
    def tournament_payload(form: Any) -> dict[str, Any]:
        return {
            "name": form.name.data.strip(),
            "description": _blank_to_none(form.description.data),
            "location": _blank_to_none(form.location.data),
        }

    # --- pairs -------------------------------------------------------------

    @staticmethod
    def pair_payload(form: Any) -> dict[str, Any]:
        """Build the create-pair body from the pair form."""
        gender = form.gender.data
        return {
            "player1": {
                "first_name": form.p1_first_name.data.strip(),
                "last_name": form.p1_last_name.data.strip(),
                "category": form.p1_category.data,
                "gender": gender,
            },
            "player2": {
                "first_name": form.p2_first_name.data.strip(),
                "last_name": form.p2_last_name.data.strip(),
                "category": form.p2_category.data,
                "gender": gender,
            },
            "schedule_constraints": _blank_to_none(form.schedule_constraints.data),
        }

    @staticmethod
    def edit_pair_payload(
        form: Any, team: dict[str, Any], players: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Build the PATCH body; player ids come from the stored team."""
        team_players = team.get("players") or []
        if len(team_players) < 2:
            raise ValidationError("La pareja no tiene dos jugadores.")
        gender = form.gender.data
        return {
            "players": [
                {
                    "player_id": team_players[0]["id"],
                    "first_name": form.p1_first_name.data.strip(),
                    "last_name": form.p1_last_name.data.strip(),
                    "category": form.p1_category.data,
                    "gender": gender,
                },
                {
                    "player_id": team_players[1]["id"],
                    "first_name": form.p2_first_name.data.strip(),
                    "last_name": form.p2_last_name.data.strip(),
                    "category": form.p2_category.data,
                    "gender": gender,
                },
            ],
            "schedule_constraints": _blank_to_none(form.schedule_constraints.data),
        }

    @staticmethod
    def fill_pair_form(
        form: Any, team: dict[str, Any], players: list[dict[str, Any]]
    ) -> None:
        """Prefill the pair form from the tournament's player records."""
        players_by_id = {p["id"]: p for p in players}
        team_players = team.get("players") or []
        for prefix, ref in zip(("p1", "p2"), team_players[:2]):
            player = players_by_id.get(ref.get("id"), {})
            getattr(form, f"{prefix}_first_name").data = player.get("first_name", "")
            getattr(form, f"{prefix}_last_name").data = player.get("last_name", "")
            getattr(form, f"{prefix}_category").data = player.get("category", "")
        genders = [
            players_by_id.get(ref.get("id"), {}).get("gender") for ref in team_players
        ]
        form.gender.data = next((g for g in genders if g), "")
        form.schedule_constraints.data = team.get("schedule_constraints") or ""

    @staticmethod
    def create_pair(
        api: ApiClient, tournament_id: int, roster: TeamRoster, payload: dict[str, Any]
    ) -> Any:
        return roster.add_pair(
            payload,
            lambda body: api.post(f"/tournaments/{tournament_id}/teams/pair", body),
        )

    @staticmethod
    def filter_teams(
        teams: list[dict[str, Any]],
        groups: list[dict[str, Any]],
        group_id: int | None = None,
        category: str | None = None,
        gender: str | None = None,
        query: str | None = None,
    ) -> list[dict[str, Any]]:
        """Narrow the pair list by group, division and a name query."""
        group_of = {
            team["id"]: group["id"]
            for group in groups
            for team in (group.get("teams") or [])
        }
        needle = (query or "").strip().lower()
        result = []
        for team in teams:
            player = first_player(team)
            if group_id is not None and group_of.get(team["id"]) != group_id:
                continue
            if category and player.get("category") != category:
                continue
            if gender and player.get("gender") != gender:
                continue
            if needle and needle not in team_label(team).lower():
                continue
            result.append(team)
        return result

    # --- groups ------------------------------------------------------------

    @staticmethod
    def groups_payload(form: Any) -> dict[str, Any]:
        """Build the generate-groups body from the form."""
        windows = []
        for entry in form.schedule_windows.entries:
            window = entry.form
            if not (window.date.data and window.start_time.data and window.end_time.data):
                continue
            if window.end_time.data <= window.start_time.data:
                raise ValidationError("El horario de fin debe ser posterior al de inicio.")
            windows.append(
                {
                    "date": window.date.data.isoformat(),
                    "start_time": window.start_time.data.strftime("%H:%M"),
                    "end_time": window.end_time.data.strftime("%H:%M"),
                }
            )
        if not windows:
            raise ValidationError("Carga al menos una franja horaria.")
        return {
            "teams_per_group": form.teams_per_group.data,
            "schedule_windows": windows,
            "match_duration_minutes": form.match_duration_minutes.data,
            "courts_count": form.courts_count.data,
        }

    @staticmethod
    def group_capacity(groups: list[dict[str, Any]]) -> int:
        """The largest group size, and never less than one."""
        return max([1] + [len(g.get("teams") or []) for g in groups])

    @staticmethod
    def check_move(
        groups: list[dict[str, Any]], source_group_id: int, target_group_id: int
    ) -> None:
        """Raise ValidationError unless the move target is a different group with room."""
        if source_group_id == target_group_id:
            raise ValidationError("La zona destino debe ser distinta.")
        target = next((g for g in groups if g["id"] == target_group_id), None)
        if target is None:
            raise ValidationError("Zona destino invalida.")
        if len(target.get("teams") or []) >= TournamentService.group_capacity(groups):
            raise ValidationError("La zona destino ya esta completa.")

    # --- playoffs ----------------------------------------------------------

    @staticmethod
    def in_division(
        match: dict[str, Any],
        teams_by_id: dict[int, dict[str, Any]],
        category: str | None,
        gender: str | None,
    ) -> bool:
        """Division is read off side A's first player."""
        player = first_player(teams_by_id.get(match.get("team_a_id")))
        if category and player.get("category") != category:
            return False
        if gender and player.get("gender") != gender:
            return False
        return True

    @staticmethod
    def playoff_rounds(
        matches: list[dict[str, Any]],
        teams_by_id: dict[int, dict[str, Any]],
        category: str | None = None,
        gender: str | None = None,
    ) -> list[tuple[str, list[dict[str, Any]]]]:
        """Playoff matches grouped by stage, in bracket order, ids ascending."""
        rounds = []
        for stage in PLAYOFF_STAGES:
            stage_matches = sorted(
                (
                    m
                    for m in matches
                    if m.get("stage") == stage
                    and TournamentService.in_division(m, teams_by_id, category, gender)
                ),
                key=lambda m: m["id"],
            )
            if stage_matches:
                rounds.append((stage, stage_matches))
        return rounds

    @staticmethod
    def next_playoff_stage(rounds: list[tuple[str, list[dict[str, Any]]]]) -> str | None:
        """The stage after the latest one that has matches, if any."""
        if not rounds:
            return None
        latest = rounds[-1][0]
        index = PLAYOFF_STAGES.index(latest)
        if index == len(PLAYOFF_STAGES) - 1:
            return None
        return PLAYOFF_STAGES[index + 1]
