"""Routes for the match blueprint."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from flask import (
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)

from provopadel.api import get_api
from provopadel.auth.decorators import login_required
from provopadel.constants import (
    CATEGORIES,
    GENDERS,
    MATCH_PENDING,
    STATUS_FINISHED,
)
from provopadel.errors import ApiError
from provopadel.tournament.forms import GeneratePlayoffsForm
from provopadel.tournament.scheduling import build_schedule
from provopadel.tournament.services import TournamentService
from provopadel.utils import index_by_id, is_safe_next

from . import bp
from .forms import ScheduleForm, SetScoresForm
from .results import ResultEntry, can_edit_results, initial_set_rows
from .services import MatchService

MATCH_TABS = ("unscheduled", "scheduled", "played")


def _back(target: str | None, tournament_id: Any, **params: Any) -> Any:
    """Redirect to a same-site page, or the tournament's match list."""
    if is_safe_next(target):
        if params:
            separator = "&" if "?" in target else "?"
            target = f"{target}{separator}{urlencode(params)}"
        return redirect(target)
    if tournament_id is None:
        return redirect(url_for("tournament.list_tournaments"))
    return redirect(url_for(".matches", tournament_id=tournament_id, **params))


def _result_form(match: dict[str, Any] | None, tournament_id: int, next_url: str):
    form = SetScoresForm(tournament_id=tournament_id, next=next_url)
    if match is not None:
        form.prefill(initial_set_rows(match))
    return form


@bp.route("/tournaments/<int:tournament_id>/schedule")
@login_required
def schedule(tournament_id: int) -> Any:
    """Render the slot by court grid."""
    context = TournamentService.load_matches_context(get_api(), tournament_id)
    grid = build_schedule(context["matches"], context["tournament"])

    matches_by_id = index_by_id(context["matches"])
    selected = matches_by_id.get(request.args.get("match", type=int))
    next_url = url_for(".schedule", tournament_id=tournament_id)

    return render_template(
        "match/schedule.html",
        grid=grid,
        selected=selected,
        result_form=_result_form(selected, tournament_id, next_url),
        can_edit=can_edit_results(context["status"]),
        teams_by_id=index_by_id(context["teams"]),
        groups_by_id=index_by_id(context["groups"]),
        match_pending=MATCH_PENDING,
        **context,
    )


@bp.route("/tournaments/<int:tournament_id>/schedule/drop", methods=["POST"])
@login_required
def drop(tournament_id: int) -> Any:
    """Move a pending match to the cell it was dropped on.

    Answers with the rebuilt grid, or 204 when the drop changes nothing.
    """
    api = get_api()
    context = TournamentService.load_matches_context(api, tournament_id)
    try:
        reconciled = MatchService.handle_drop(
            api,
            context["matches"],
            request.get_json(silent=True),
            context["tournament"],
        )
    except ApiError as e:
        if e.is_unauthorized:
            raise
        current_app.logger.warning(f"Reschedule failed: {e.message}")
        return jsonify(error=e.message), e.status if 400 <= e.status < 600 else 502

    if reconciled is None:
        return "", 204
    return render_template(
        "match/_grid.html",
        grid=build_schedule(reconciled, context["tournament"]),
        tournament=context["tournament"],
        selected=None,
        teams_by_id=index_by_id(context["teams"]),
        groups_by_id=index_by_id(context["groups"]),
        match_pending=MATCH_PENDING,
    )


@bp.route("/tournaments/<int:tournament_id>/matches")
@login_required
def matches(tournament_id: int) -> Any:
    """List matches by scheduling state, filtered by division and stage."""
    context = TournamentService.load_matches_context(get_api(), tournament_id)
    teams_by_id = index_by_id(context["teams"])

    category = request.args.get("category") or None
    gender = request.args.get("gender") or None
    stage = request.args.get("stage") or None
    tab = request.args.get("tab")
    if tab not in MATCH_TABS:
        tab = MATCH_TABS[0]

    visible = [
        m
        for m in context["matches"]
        if TournamentService.in_division(m, teams_by_id, category, gender)
        and (stage is None or m.get("stage") == stage)
    ]
    tabs = MatchService.split_tabs(visible)

    matches_by_id = index_by_id(context["matches"])
    selected = matches_by_id.get(request.args.get("match", type=int))
    next_url = url_for(
        ".matches",
        tournament_id=tournament_id,
        tab=tab,
        category=category,
        gender=gender,
        stage=stage,
    )
    schedule_form = None
    if selected is not None:
        schedule_form = ScheduleForm(
            data=MatchService.schedule_defaults(selected), next=next_url
        )

    return render_template(
        "match/matches.html",
        tabs=tabs,
        tab=tab,
        selected=selected,
        schedule_form=schedule_form,
        result_form=_result_form(selected, tournament_id, next_url),
        can_schedule=context["status"] != STATUS_FINISHED,
        can_edit=can_edit_results(context["status"]),
        teams_by_id=teams_by_id,
        groups_by_id=index_by_id(context["groups"]),
        categories=CATEGORIES,
        genders=GENDERS,
        filters={"category": category, "gender": gender, "stage": stage},
        **context,
    )


@bp.route("/tournaments/<int:tournament_id>/playoffs")
@login_required
def playoffs(tournament_id: int) -> Any:
    """Show the bracket rounds for one division."""
    context = TournamentService.load_matches_context(get_api(), tournament_id)
    teams_by_id = index_by_id(context["teams"])

    category = request.args.get("category") or None
    gender = request.args.get("gender") or None
    rounds = TournamentService.playoff_rounds(
        context["matches"], teams_by_id, category, gender
    )

    form = GeneratePlayoffsForm(
        category=category or "",
        gender=gender or "",
        stage=TournamentService.next_playoff_stage(rounds) or "quarter",
    )
    matches_by_id = index_by_id(context["matches"])
    selected = matches_by_id.get(request.args.get("match", type=int))
    next_url = url_for(
        ".playoffs", tournament_id=tournament_id, category=category, gender=gender
    )

    return render_template(
        "match/playoffs.html",
        rounds=rounds,
        generate_form=form,
        selected=selected,
        result_form=_result_form(selected, tournament_id, next_url),
        can_edit=can_edit_results(context["status"]),
        teams_by_id=teams_by_id,
        categories=CATEGORIES,
        genders=GENDERS,
        filters={"category": category, "gender": gender},
        **context,
    )


@bp.route("/tournaments/<int:tournament_id>/playoffs/generate", methods=["POST"])
@login_required
def generate_playoffs(tournament_id: int) -> Any:
    """Generate one playoff stage for a division."""
    form = GeneratePlayoffsForm()
    if not form.validate_on_submit():
        flash("Elegi categoria y genero para generar los playoffs.", "danger")
        return redirect(url_for(".playoffs", tournament_id=tournament_id))

    params = {"category": form.category.data, "gender": form.gender.data}
    try:
        get_api().post(
            f"/tournaments/{tournament_id}/generate-playoffs",
            {"stage": form.stage.data, **params},
        )
    except ApiError as e:
        if e.is_unauthorized:
            raise
        flash(e.message or "No se pudieron generar los playoffs.", "danger")
    else:
        flash("Playoffs generados.", "success")
    return redirect(url_for(".playoffs", tournament_id=tournament_id, **params))


@bp.route("/matches/<int:match_id>/start", methods=["POST"])
@login_required
def start_match(match_id: int) -> Any:
    """Mark a match as being played."""
    tournament_id = request.form.get("tournament_id", type=int)
    try:
        MatchService.start(get_api(), match_id)
    except ApiError as e:
        if e.is_unauthorized:
            raise
        flash(e.message or "No se pudo iniciar el partido.", "danger")
    else:
        flash("Partido iniciado.", "success")
    return _back(request.form.get("next"), tournament_id)


@bp.route("/matches/<int:match_id>/schedule", methods=["POST"])
@login_required
def schedule_match(match_id: int) -> Any:
    """Assign date, time and court from the schedule form."""
    form = ScheduleForm()
    tournament_id = request.form.get("tournament_id", type=int)
    if not form.validate_on_submit():
        for errors in form.errors.values():
            flash(errors[0], "danger")
            break
        return _back(form.next.data, tournament_id, match=match_id)

    api = get_api()
    if tournament_id and TournamentService.get_status(api, tournament_id) == STATUS_FINISHED:
        flash("El torneo ya termino, no se puede reprogramar.", "warning")
        return _back(form.next.data, tournament_id)

    try:
        response = MatchService.reschedule(
            api,
            match_id,
            form.scheduled_time,
            form.court_number.data,
            scheduled_date=form.scheduled_date.data.isoformat(),
        )
    except ApiError as e:
        if e.is_unauthorized:
            raise
        flash(e.message or "No se pudo programar el partido.", "danger")
        return _back(form.next.data, tournament_id, match=match_id)

    if (response or {}).get("swapped"):
        flash("Partido programado. Se intercambio el turno con otro partido.", "success")
    else:
        flash("Partido programado.", "success")
    return _back(form.next.data, tournament_id)


@bp.route("/matches/<int:match_id>/result", methods=["POST"])
@login_required
def submit_result(match_id: int) -> Any:
    """Validate and save a match result."""
    api = get_api()
    form = SetScoresForm()
    tournament_id = form.tournament_id.data
    if not form.validate_on_submit():
        flash("No se pudo leer el formulario.", "danger")
        return _back(form.next.data, tournament_id)

    status = TournamentService.get_status(api, tournament_id)
    if not can_edit_results(status):
        flash("Solo podes cargar resultados con el torneo en juego.", "warning")
        return _back(form.next.data, tournament_id)

    entry = ResultEntry(form.rows())
    updated = MatchService.submit_result(api, match_id, entry)
    if updated is None:
        flash(entry.error or "No se pudo guardar el resultado", "danger")
        return _back(form.next.data, tournament_id, match=match_id)

    current_app.logger.info(f"Result saved for match {match_id}")
    target = form.next.data if is_safe_next(form.next.data) else url_for(
        ".matches", tournament_id=tournament_id
    )
    return render_template(
        "match/result_saved.html",
        match=updated,
        redirect_url=target,
        redirect_delay=current_app.config["RESULT_REDIRECT_DELAY"],
    )
