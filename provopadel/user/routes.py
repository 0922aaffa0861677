"""Routes for the user blueprint."""

from __future__ import annotations

from typing import Any

from flask import current_app, flash, redirect, render_template, request, url_for

from provopadel.api import get_api
from provopadel.auth.decorators import login_required
from provopadel.errors import ApiError

from . import bp
from .forms import PlayerForm, ProfileForm
from .services import UserService


@bp.route("/dashboard")
@login_required
def dashboard() -> Any:
    """Render the organizer's dashboard."""
    stats = UserService.dashboard_stats(get_api())
    return render_template("user/dashboard.html", stats=stats)


@bp.route("/profile", methods=["GET", "POST"])
@login_required
def profile() -> Any:
    """Show and edit the club profile."""
    api = get_api()
    form = ProfileForm()
    if form.validate_on_submit():
        try:
            UserService.update_profile(api, form.club_name.data, form.club_location.data)
        except ApiError as e:
            if e.is_unauthorized:
                raise
            flash(e.message, "danger")
        else:
            flash("Perfil actualizado.", "success")
            return redirect(url_for(".profile"))

    profile_data = UserService.get_profile(api)
    if request.method == "GET":
        form.club_name.data = profile_data.get("club_name") or ""
        form.club_location.data = profile_data.get("club_location") or ""
    return render_template("user/profile.html", form=form, profile=profile_data)


@bp.route("/players", methods=["GET", "POST"])
@login_required
def players() -> Any:
    """List players and create new ones."""
    api = get_api()
    form = PlayerForm()
    if form.validate_on_submit():
        try:
            api.post("/players", UserService.player_payload(form))
        except ApiError as e:
            if e.is_unauthorized:
                raise
            flash(e.message, "danger")
        else:
            flash("Jugador creado.", "success")
            return redirect(url_for(".players"))

    return render_template(
        "user/players.html", form=form, players=UserService.list_players(api)
    )


@bp.route("/players/<int:player_id>/edit", methods=["GET", "POST"])
@login_required
def edit_player(player_id: int) -> Any:
    """Edit one player."""
    api = get_api()
    form = PlayerForm()
    if form.validate_on_submit():
        try:
            api.put(f"/players/{player_id}", UserService.player_payload(form))
        except ApiError as e:
            if e.is_unauthorized:
                raise
            flash(e.message, "danger")
        else:
            flash("Jugador actualizado.", "success")
            return redirect(url_for(".players"))

    player = next(
        (p for p in UserService.list_players(api) if p["id"] == player_id), None
    )
    if player is None:
        flash("Jugador no encontrado.", "danger")
        return redirect(url_for(".players"))
    if request.method == "GET":
        form.first_name.data = player.get("first_name")
        form.last_name.data = player.get("last_name")
        form.category.data = player.get("category")
    return render_template("user/edit_player.html", form=form, player=player)


@bp.route("/players/<int:player_id>/delete", methods=["POST"])
@login_required
def delete_player(player_id: int) -> Any:
    """Delete one player."""
    try:
        get_api().delete(f"/players/{player_id}")
    except ApiError as e:
        if e.is_unauthorized:
            raise
        current_app.logger.warning(f"Could not delete player {player_id}: {e.message}")
        flash(e.message, "danger")
    else:
        flash("Jugador eliminado.", "success")
    return redirect(url_for(".players"))
