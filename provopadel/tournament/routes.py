"""Routes for the tournament blueprint."""

from __future__ import annotations

from typing import Any

from flask import (
    Response,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from provopadel.api import get_api
from provopadel.auth.decorators import login_required
from provopadel.constants import CATEGORIES, GENDERS, IMPORT_ERROR_LIMIT, STATUS_UPCOMING
from provopadel.errors import ApiError, ValidationError
from provopadel.utils import index_by_id

from . import bp
from .forms import (
    GenerateGroupsForm,
    ImportPairsForm,
    MoveTeamForm,
    PairForm,
    TournamentForm,
)
from .services import TournamentService
from .teams import TeamRoster, import_pairs, import_template_csv, parse_pairs_upload


def _flash_api_error(e: ApiError) -> None:
    if e.is_unauthorized:
        raise e
    flash(e.message, "danger")


def _require_upcoming(status: str | None, tournament_id: int) -> Any:
    """Return a redirect when pair or group edits are no longer allowed."""
    if status != STATUS_UPCOMING:
        flash("Solo podes modificar parejas y zonas antes de iniciar el torneo.", "warning")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))
    return None


@bp.route("/", methods=["GET", "POST"])
@login_required
def list_tournaments() -> Any:
    """List the organizer's tournaments and create new ones."""
    api = get_api()
    form = TournamentForm()
    if form.validate_on_submit():
        try:
            created = api.post("/tournaments", TournamentService.tournament_payload(form))
        except ApiError as e:
            _flash_api_error(e)
        else:
            flash("Torneo creado.", "success")
            return redirect(url_for(".view_tournament", tournament_id=created["id"]))

    tournaments = TournamentService.list_tournaments(api)
    return render_template("tournament/list.html", tournaments=tournaments, form=form)


@bp.route("/<int:tournament_id>")
@login_required
def view_tournament(tournament_id: int) -> Any:
    """Show a tournament with its pairs and groups."""
    api = get_api()
    detail = TournamentService.load_detail(api, tournament_id)

    group_id = request.args.get("group", type=int)
    category = request.args.get("category") or None
    gender = request.args.get("gender") or None
    query = request.args.get("q") or None
    visible_teams = TournamentService.filter_teams(
        detail["teams"], detail["groups"], group_id, category, gender, query
    )

    move_form = MoveTeamForm()
    move_form.target_group_id.choices = [
        (g["id"], f"{g['name']} ({len(g.get('teams') or [])})") for g in detail["groups"]
    ]

    return render_template(
        "tournament/detail.html",
        roster=TeamRoster.from_api(visible_teams),
        team_count=len(detail["teams"]),
        edit_form=TournamentForm(data=detail["tournament"]),
        pair_form=PairForm(),
        import_form=ImportPairsForm(),
        groups_form=GenerateGroupsForm(),
        move_form=move_form,
        group_capacity=TournamentService.group_capacity(detail["groups"]),
        categories=CATEGORIES,
        genders=GENDERS,
        filters={"group": group_id, "category": category, "gender": gender, "q": query},
        **detail,
    )


@bp.route("/<int:tournament_id>/edit", methods=["POST"])
@login_required
def edit_tournament(tournament_id: int) -> Any:
    """Update name, description and location."""
    form = TournamentForm()
    if not form.validate_on_submit():
        flash("El nombre del torneo es obligatorio.", "danger")
    else:
        try:
            get_api().patch(
                f"/tournaments/{tournament_id}", TournamentService.tournament_payload(form)
            )
        except ApiError as e:
            _flash_api_error(e)
        else:
            flash("Torneo actualizado.", "success")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))


@bp.route("/<int:tournament_id>/delete", methods=["POST"])
@login_required
def delete_tournament(tournament_id: int) -> Any:
    """Delete a tournament."""
    try:
        get_api().delete(f"/tournaments/{tournament_id}")
    except ApiError as e:
        _flash_api_error(e)
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))
    current_app.logger.info(f"Tournament {tournament_id} deleted")
    flash("Torneo eliminado.", "success")
    return redirect(url_for(".list_tournaments"))


@bp.route("/<int:tournament_id>/start", methods=["POST"])
@login_required
def start_tournament(tournament_id: int) -> Any:
    """Move the tournament from upcoming to ongoing."""
    try:
        result = get_api().post(f"/tournaments/{tournament_id}/start")
    except ApiError as e:
        _flash_api_error(e)
    else:
        flash((result or {}).get("message") or "Torneo iniciado.", "success")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))


# --- pairs -----------------------------------------------------------------


@bp.route("/<int:tournament_id>/pairs", methods=["POST"])
@login_required
def add_pair(tournament_id: int) -> Any:
    """Register a pair."""
    api = get_api()
    detail = TournamentService.load_detail(api, tournament_id)
    blocked = _require_upcoming(detail["status"], tournament_id)
    if blocked:
        return blocked

    form = PairForm()
    if not form.validate_on_submit():
        flash("Completa los datos de ambos jugadores.", "danger")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))

    roster = TeamRoster.from_api(detail["teams"])
    try:
        team = TournamentService.create_pair(
            api, tournament_id, roster, TournamentService.pair_payload(form)
        )
    except ApiError as e:
        _flash_api_error(e)
    else:
        current_app.logger.info(f"Pair {team.id} added to tournament {tournament_id}")
        flash("Pareja creada.", "success")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))


@bp.route("/<int:tournament_id>/pairs/<int:team_id>/edit", methods=["GET", "POST"])
@login_required
def edit_pair(tournament_id: int, team_id: int) -> Any:
    """Edit the players or constraints of a pair."""
    api = get_api()
    detail = TournamentService.load_detail(api, tournament_id)
    blocked = _require_upcoming(detail["status"], tournament_id)
    if blocked:
        return blocked

    team = index_by_id(detail["teams"]).get(team_id)
    if team is None:
        flash("Pareja no encontrada.", "danger")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))

    form = PairForm()
    if form.validate_on_submit():
        try:
            payload = TournamentService.edit_pair_payload(form, team, detail["players"])
            api.patch(f"/tournaments/{tournament_id}/teams/{team_id}", payload)
        except ValidationError as e:
            flash(e.message, "danger")
        except ApiError as e:
            _flash_api_error(e)
        else:
            flash("Pareja actualizada.", "success")
            return redirect(url_for(".view_tournament", tournament_id=tournament_id))
    elif request.method == "GET":
        TournamentService.fill_pair_form(form, team, detail["players"])

    return render_template(
        "tournament/edit_pair.html",
        form=form,
        team=team,
        tournament=detail["tournament"],
    )


@bp.route("/<int:tournament_id>/pairs/<int:team_id>/delete", methods=["POST"])
@login_required
def delete_pair(tournament_id: int, team_id: int) -> Any:
    """Remove a pair; groups are reloaded on the next render."""
    try:
        get_api().delete(f"/tournaments/{tournament_id}/teams/{team_id}")
    except ApiError as e:
        _flash_api_error(e)
    else:
        flash("Pareja eliminada.", "success")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))


@bp.route("/<int:tournament_id>/pairs/import", methods=["POST"])
@login_required
def import_pairs_file(tournament_id: int) -> Any:
    """Create pairs in bulk from an uploaded CSV or Excel file."""
    api = get_api()
    detail = TournamentService.load_detail(api, tournament_id)
    if detail["status"] != STATUS_UPCOMING:
        flash("Solo podes importar parejas antes de iniciar el torneo.", "warning")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))

    form = ImportPairsForm()
    if not form.validate_on_submit():
        for errors in form.errors.values():
            for error in errors:
                flash(error, "danger")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))

    upload = form.file.data
    try:
        pairs, row_errors = parse_pairs_upload(upload.filename or "", upload.read())
    except UnicodeDecodeError:
        flash("No se pudo leer el archivo. Guardalo como CSV UTF-8.", "danger")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))
    except ValidationError as e:
        flash(e.message, "danger")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))

    if not pairs:
        flash("No se encontraron parejas validas para importar.", "danger")
        for error in row_errors[:IMPORT_ERROR_LIMIT]:
            flash(error, "danger")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))

    roster = TeamRoster.from_api(detail["teams"])
    summary = import_pairs(
        roster,
        pairs,
        lambda body: api.post(f"/tournaments/{tournament_id}/teams/pair", body),
        errors=row_errors,
    )
    current_app.logger.info(
        f"Imported pairs into tournament {tournament_id}: "
        f"{summary['created']}/{summary['total']} created"
    )
    category = "success" if not summary["failed"] and not summary["errors"] else "warning"
    flash(
        f"Importacion: {summary['created']} creadas, {summary['failed']} con error "
        f"de {summary['total']} filas.",
        category,
    )
    for error in summary["errors"]:
        flash(error, "danger")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))


@bp.route("/pairs/template.csv")
@login_required
def import_template() -> Any:
    """Download the CSV template for the pair import."""
    return Response(
        import_template_csv(),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=parejas.csv"},
    )


# --- groups ----------------------------------------------------------------


@bp.route("/<int:tournament_id>/groups/generate", methods=["POST"])
@login_required
def generate_groups(tournament_id: int) -> Any:
    """Split the registered pairs into groups."""
    form = GenerateGroupsForm()
    if not form.validate_on_submit():
        flash("Revisa los datos para generar las zonas.", "danger")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))

    try:
        payload = TournamentService.groups_payload(form)
        result = get_api().post(f"/tournaments/{tournament_id}/groups/generate", payload)
    except ValidationError as e:
        flash(e.message, "danger")
    except ApiError as e:
        _flash_api_error(e)
    else:
        flash((result or {}).get("message") or "Zonas generadas.", "success")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))


@bp.route("/<int:tournament_id>/groups/<int:group_id>/delete", methods=["POST"])
@login_required
def delete_group(tournament_id: int, group_id: int) -> Any:
    """Delete an empty group."""
    api = get_api()
    blocked = _require_upcoming(TournamentService.get_status(api, tournament_id), tournament_id)
    if blocked:
        return blocked
    try:
        api.delete(f"/tournaments/{tournament_id}/groups/{group_id}")
    except ApiError as e:
        _flash_api_error(e)
    else:
        flash("Zona eliminada.", "success")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))


@bp.route(
    "/<int:tournament_id>/groups/<int:group_id>/teams/<int:team_id>/remove",
    methods=["POST"],
)
@login_required
def remove_group_team(tournament_id: int, group_id: int, team_id: int) -> Any:
    """Take a team out of a group."""
    api = get_api()
    blocked = _require_upcoming(TournamentService.get_status(api, tournament_id), tournament_id)
    if blocked:
        return blocked
    try:
        api.delete(f"/tournaments/{tournament_id}/groups/{group_id}/teams/{team_id}")
    except ApiError as e:
        _flash_api_error(e)
    else:
        flash("Equipo quitado de la zona.", "success")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))


@bp.route(
    "/<int:tournament_id>/groups/<int:group_id>/teams/<int:team_id>/move",
    methods=["POST"],
)
@login_required
def move_group_team(tournament_id: int, group_id: int, team_id: int) -> Any:
    """Move a team to another group with room."""
    api = get_api()
    detail = TournamentService.load_detail(api, tournament_id)
    blocked = _require_upcoming(detail["status"], tournament_id)
    if blocked:
        return blocked

    form = MoveTeamForm()
    form.target_group_id.choices = [(g["id"], g["name"]) for g in detail["groups"]]
    if not form.validate_on_submit():
        flash("Selecciona equipo y zona destino.", "danger")
        return redirect(url_for(".view_tournament", tournament_id=tournament_id))

    target_group_id = form.target_group_id.data
    try:
        TournamentService.check_move(detail["groups"], group_id, target_group_id)
        api.post(
            f"/tournaments/{tournament_id}/groups/{group_id}/teams/{team_id}/move",
            {"target_group_id": target_group_id},
        )
    except ValidationError as e:
        flash(e.message, "danger")
    except ApiError as e:
        _flash_api_error(e)
    else:
        flash("Equipo movido.", "success")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))
