"""Utility functions for the application."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from .constants import GENDERS, MATCH_STATUS_LABELS, STAGE_LABELS


def team_label(team: Any, team_id: Any = None) -> str:
    """Join player names, or fall back to ``Team #id``."""
    if team is None:
        return f"Team #{team_id}"
    players = team.get("players") if isinstance(team, dict) else team.players
    names = [p.get("name") for p in (players or []) if p.get("name")]
    if names:
        return " / ".join(names)
    if team_id is None:
        team_id = team.get("id") if isinstance(team, dict) else getattr(team, "id", None)
    return f"Team #{team_id}"


def index_by_id(items: list[dict[str, Any]] | None) -> dict[int, dict[str, Any]]:
    """Map a list of API documents by their id."""
    return {item["id"]: item for item in (items or [])}


def match_team_labels(
    match: dict[str, Any], teams_by_id: dict[int, dict[str, Any]]
) -> tuple[str, str]:
    """Labels for side A and side B of a match."""
    a_id = match.get("team_a_id")
    b_id = match.get("team_b_id")
    return (
        team_label(teams_by_id.get(a_id), a_id),
        team_label(teams_by_id.get(b_id), b_id),
    )


def stage_label(
    match: dict[str, Any], groups_by_id: dict[int, dict[str, Any]] | None = None
) -> str:
    """Group matches show their group name; playoff matches their round."""
    stage = match.get("stage")
    if stage == "group":
        group = (groups_by_id or {}).get(match.get("group_id"))
        return group["name"] if group and group.get("name") else "Zona"
    return STAGE_LABELS.get(stage, stage or "")


def format_sets(sets: list[dict[str, Any]] | None) -> str:
    """Render sets as ``6-4 3-6 7-5``."""
    if not sets:
        return "-"
    return " ".join(f"{s['a']}-{s['b']}" for s in sets)


def gender_label(value: str | None) -> str:
    for key, label in GENDERS:
        if value and value.lower() == key:
            return label
    return value or ""


def division_label(team: dict[str, Any] | None) -> str | None:
    """``<category> - Damas|Masculino`` from the team's first player."""
    players = (team or {}).get("players") or []
    if not players:
        return None
    first = players[0]
    category = first.get("category")
    gender = first.get("gender")
    if not category or not gender:
        return None
    return f"{category} - {gender_label(gender)}"


def is_safe_next(target: str | None) -> bool:
    """Only same-site relative paths may be used as a post-login target."""
    if not target:
        return False
    parts = urlsplit(target)
    if parts.scheme or parts.netloc:
        return False
    return target.startswith("/") and not target.startswith("//")


def register_filters(app):
    """Register the Jinja filters used by the templates."""
    from .group.standings import format_diff
    from .tournament.scheduling import format_minutes

    app.jinja_env.filters["format_sets"] = format_sets
    app.jinja_env.filters["team_label"] = team_label
    app.jinja_env.filters["signed"] = format_diff
    app.jinja_env.filters["minutes"] = format_minutes
    app.jinja_env.filters["stage_name"] = lambda stage: STAGE_LABELS.get(stage, stage)
    app.jinja_env.filters["match_status"] = lambda status: MATCH_STATUS_LABELS.get(
        status, status
    )
    app.jinja_env.globals["stage_label"] = stage_label
    app.jinja_env.globals["division_label"] = division_label
