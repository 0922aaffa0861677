"""Routes for the viewer blueprint."""

from __future__ import annotations

from typing import Any

from flask import render_template, request

from provopadel.api import get_api
from provopadel.utils import index_by_id

from . import bp
from .services import ALL_DIVISIONS, ViewerService

SECTIONS = ("groups", "matches", "playoffs")


@bp.route("/tournaments/<int:tournament_id>")
def tournament(tournament_id: int) -> Any:
    """Render the public page for a tournament."""
    data = ViewerService.load(get_api(), tournament_id)

    divisions = ViewerService.divisions(data["teams"])
    division = request.args.get("division")
    if not division:
        division = divisions[0] if divisions else ALL_DIVISIONS
    query = request.args.get("q", "")
    section = request.args.get("section")
    if section not in SECTIONS:
        section = SECTIONS[0]

    matches = ViewerService.filter_matches(data["matches"], data["teams"], division, query)
    group_matches = [m for m in matches if m.get("stage") == "group"]
    playoff_matches = [m for m in matches if m.get("stage") != "group"]
    pending, played = ViewerService.split_by_status(matches)

    return render_template(
        "viewer/tournament.html",
        tournament=data["tournament"],
        status=data["status"],
        groups=ViewerService.filter_groups(data["groups"], division, query),
        standings=data["standings"],
        group_matches=group_matches,
        playoff_matches=ViewerService.split_by_status(playoff_matches),
        pending=pending,
        played=played,
        divisions=divisions,
        division=division,
        all_divisions=ALL_DIVISIONS,
        query=query,
        section=section,
        teams_by_id=index_by_id(data["teams"]),
        groups_by_id=index_by_id(data["groups"]),
    )
