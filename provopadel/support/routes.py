"""Routes for the support blueprint."""

from __future__ import annotations

from typing import Any

from flask import flash, redirect, render_template, request, url_for

from provopadel.api import get_api
from provopadel.auth.decorators import login_required
from provopadel.errors import ApiError

from . import bp
from .forms import ReplyForm, TicketForm
from .services import STATUS_CLOSED, SupportService


@bp.route("/", methods=["GET", "POST"])
@login_required
def tickets() -> Any:
    """List the organizer's tickets and open new ones."""
    api = get_api()
    form = TicketForm()
    if form.validate_on_submit():
        try:
            created = SupportService.create_ticket(api, form.subject.data, form.message.data)
        except ApiError as e:
            if e.is_unauthorized:
                raise
            flash(e.message or "No se pudo enviar el ticket", "danger")
        else:
            flash("Ticket enviado.", "success")
            return redirect(url_for(".ticket", ticket_id=created["id"]))

    selected = request.args.get("ticket", type=int)
    return render_template(
        "support/tickets.html",
        form=form,
        tickets=SupportService.list_tickets(api),
        selected=selected,
        status_label=SupportService.status_label,
    )


@bp.route("/<int:ticket_id>", methods=["GET", "POST"])
@login_required
def ticket(ticket_id: int) -> Any:
    """Show a ticket's messages and reply to it."""
    api = get_api()
    detail = SupportService.get_ticket(api, ticket_id)
    form = ReplyForm()
    if form.validate_on_submit():
        if detail.get("status") == STATUS_CLOSED:
            flash("El ticket esta cerrado. Crea uno nuevo si tenes otra consulta.", "warning")
            return redirect(url_for(".ticket", ticket_id=ticket_id))
        try:
            SupportService.reply(api, ticket_id, form.body.data)
        except ApiError as e:
            if e.is_unauthorized:
                raise
            flash(e.message or "No se pudo enviar el mensaje", "danger")
        else:
            status = SupportService.status_after_reply(detail.get("status"), by_admin=False)
            flash(f"Mensaje enviado. Estado: {SupportService.status_label(status)}.", "success")
            return redirect(url_for(".ticket", ticket_id=ticket_id))

    return render_template(
        "support/ticket.html",
        ticket=detail,
        form=form,
        status_label=SupportService.status_label,
    )
