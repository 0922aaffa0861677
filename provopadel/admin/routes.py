"""Admin routes for the application."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from flask import current_app, flash, redirect, render_template, request, url_for

from provopadel.api import get_api
from provopadel.auth.decorators import login_required
from provopadel.errors import ApiError
from provopadel.support.forms import ReplyForm, TicketUpdateForm
from provopadel.support.services import STATUS_OPEN, STATUS_LABELS, SupportService
from provopadel.utils import index_by_id

from . import bp
from .forms import EditUserForm, PaymentForm, UserForm
from .services import AdminService


def _flash_api_error(e: ApiError, fallback: str) -> None:
    """Flash a failed call; session and permission problems go to the global handler."""
    if e.is_unauthorized or e.is_forbidden:
        raise e
    flash(e.message or fallback, "danger")


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _parse_amount(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


@bp.route("/")
@login_required(admin_required=True)
def dashboard() -> Any:
    """Render the main admin dashboard."""
    data = AdminService.dashboard(get_api())
    return render_template(
        "admin/dashboard.html",
        metrics=data["metrics"],
        bars=AdminService.chart_bars(data["series"]),
    )


# --- users -----------------------------------------------------------------


@bp.route("/users", methods=["GET", "POST"])
@login_required(admin_required=True)
def users() -> Any:
    """List organizer accounts and create new ones."""
    api = get_api()
    form = UserForm()
    if form.validate_on_submit():
        try:
            api.post("/admin/users", AdminService.user_payload(form, creating=True))
        except ApiError as e:
            _flash_api_error(e, "No se pudo crear usuario")
        else:
            flash("Usuario creado.", "success")
            return redirect(url_for(".users"))

    return render_template("admin/users.html", form=form, users=api.get("/admin/users") or [])


@bp.route("/users/<int:user_id>/edit", methods=["GET", "POST"])
@login_required(admin_required=True)
def edit_user(user_id: int) -> Any:
    """Edit an organizer account."""
    api = get_api()
    user = index_by_id(api.get("/admin/users")).get(user_id)
    if user is None:
        flash("Usuario no encontrado.", "danger")
        return redirect(url_for(".users"))

    form = EditUserForm(data={**user, "status_override": user.get("status_override") or ""})
    if form.validate_on_submit():
        try:
            api.put(f"/admin/users/{user_id}", AdminService.user_payload(form, creating=False))
        except ApiError as e:
            _flash_api_error(e, "No se pudo actualizar usuario")
        else:
            flash("Usuario actualizado.", "success")
            return redirect(url_for(".users"))

    return render_template("admin/edit_user.html", form=form, user=user)


@bp.route("/users/<int:user_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_user(user_id: int) -> Any:
    """Delete an organizer account."""
    try:
        get_api().delete(f"/admin/users/{user_id}")
    except ApiError as e:
        _flash_api_error(e, "No se pudo eliminar usuario")
    else:
        current_app.logger.info(f"Admin deleted user {user_id}")
        flash("Usuario eliminado.", "success")
    return redirect(url_for(".users"))


# --- payments --------------------------------------------------------------


def _payment_form(users_list: list[dict[str, Any]], **kwargs: Any) -> PaymentForm:
    form = PaymentForm(**kwargs)
    form.user_id.choices = [
        (u["id"], u.get("club_name") or u.get("email") or f"#{u['id']}") for u in users_list
    ]
    return form


@bp.route("/payments", methods=["GET", "POST"])
@login_required(admin_required=True)
def payments() -> Any:
    """List payments, newest first, and record new ones."""
    api = get_api()
    users_list = api.get("/admin/users") or []
    form = _payment_form(users_list)
    if form.validate_on_submit():
        try:
            api.post("/admin/payments", AdminService.payment_payload(form, creating=True))
        except ApiError as e:
            _flash_api_error(e, "No se pudo crear el pago")
        else:
            flash("Pago registrado.", "success")
            return redirect(url_for(".payments"))

    return render_template(
        "admin/payments.html",
        form=form,
        payments=AdminService.sort_payments(api.get("/admin/payments") or []),
        users_by_id=index_by_id(users_list),
    )


@bp.route("/payments/<int:payment_id>/edit", methods=["GET", "POST"])
@login_required(admin_required=True)
def edit_payment(payment_id: int) -> Any:
    """Edit a payment."""
    api = get_api()
    payment = index_by_id(api.get("/admin/payments")).get(payment_id)
    if payment is None:
        flash("Pago no encontrado.", "danger")
        return redirect(url_for(".payments"))

    users_list = api.get("/admin/users") or []
    form = _payment_form(
        users_list,
        data={
            **payment,
            "paid_at": _parse_date(payment.get("paid_at")),
            "expires_at": _parse_date(payment.get("expires_at")),
            "amount": _parse_amount(payment.get("amount")),
        },
    )
    if form.validate_on_submit():
        try:
            api.put(
                f"/admin/payments/{payment_id}",
                AdminService.payment_payload(form, creating=False),
            )
        except ApiError as e:
            _flash_api_error(e, "No se pudo actualizar el pago")
        else:
            flash("Pago actualizado.", "success")
            return redirect(url_for(".payments"))

    return render_template("admin/edit_payment.html", form=form, payment=payment)


@bp.route("/payments/<int:payment_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_payment(payment_id: int) -> Any:
    """Delete a payment."""
    try:
        get_api().delete(f"/admin/payments/{payment_id}")
    except ApiError as e:
        _flash_api_error(e, "No se pudo eliminar el pago")
    else:
        flash("Pago eliminado.", "success")
    return redirect(url_for(".payments"))


# --- support inbox ---------------------------------------------------------


@bp.route("/support")
@login_required(admin_required=True)
def support() -> Any:
    """Ticket inbox filtered by status."""
    tickets = get_api().get("/admin/support/tickets") or []
    status = request.args.get("status")
    if status not in STATUS_LABELS:
        status = STATUS_OPEN
    order = "asc" if request.args.get("order") == "asc" else "desc"
    return render_template(
        "admin/support.html",
        tickets=SupportService.sort_tickets(tickets, status, descending=order == "desc"),
        counts=SupportService.status_counts(tickets),
        status=status,
        order=order,
        status_labels=STATUS_LABELS,
    )


@bp.route("/support/<int:ticket_id>")
@login_required(admin_required=True)
def support_ticket(ticket_id: int) -> Any:
    """One ticket with its thread, status and tags."""
    ticket = get_api().get(f"/admin/support/tickets/{ticket_id}")
    update_form = TicketUpdateForm(
        status=ticket.get("status") or STATUS_OPEN,
        tags=", ".join(ticket.get("tags") or []),
    )
    return render_template(
        "admin/support_ticket.html",
        ticket=ticket,
        update_form=update_form,
        reply_form=ReplyForm(),
        first_response=SupportService.first_response_minutes(ticket.get("messages")),
        status_labels=STATUS_LABELS,
    )


@bp.route("/support/<int:ticket_id>/update", methods=["POST"])
@login_required(admin_required=True)
def update_ticket(ticket_id: int) -> Any:
    """Change a ticket's status and tags."""
    form = TicketUpdateForm()
    if form.validate_on_submit():
        try:
            get_api().put(
                f"/admin/support/tickets/{ticket_id}",
                {"status": form.status.data, "tags": SupportService.parse_tags(form.tags.data)},
            )
        except ApiError as e:
            _flash_api_error(e, "No se pudo actualizar el ticket")
        else:
            flash("Ticket actualizado.", "success")
    return redirect(url_for(".support_ticket", ticket_id=ticket_id))


@bp.route("/support/<int:ticket_id>/reply", methods=["POST"])
@login_required(admin_required=True)
def reply_ticket(ticket_id: int) -> Any:
    """Answer a ticket as support staff."""
    form = ReplyForm()
    current_status = request.form.get("current_status")
    if form.validate_on_submit():
        try:
            get_api().post(
                f"/admin/support/tickets/{ticket_id}/messages", {"body": form.body.data.strip()}
            )
        except ApiError as e:
            _flash_api_error(e, "No se pudo enviar la respuesta")
        else:
            status = SupportService.status_after_reply(current_status, by_admin=True)
            flash(f"Respuesta enviada. Estado: {STATUS_LABELS[status]}.", "success")
    return redirect(url_for(".support_ticket", ticket_id=ticket_id))
