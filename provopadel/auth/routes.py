from flask import (
    current_app,
    flash,
    g,
    redirect,
    render_template,
    request,
    url_for,
)

from provopadel.api import get_api
from provopadel.errors import ApiError

from . import bp
from .forms import ForgotPasswordForm, LoginForm, RegisterForm, ResetPasswordForm
from .utils import reset_error_message, resolve_landing


@bp.route("/login", methods=["GET", "POST"])
def login():
    """Exchange email and password for a bearer token."""
    form = LoginForm()
    if request.method == "GET":
        form.next.data = request.args.get("next", "")

    if form.validate_on_submit():
        try:
            data = get_api().post(
                "/auth/login",
                form={
                    "username": form.email.data.strip(),
                    "password": form.password.data,
                },
                auth=False,
            )
        except ApiError as e:
            detail = e.details.get("detail") if isinstance(e.details, dict) else None
            message = detail if isinstance(detail, str) else None
            if not message and not e.is_unauthorized:
                message = e.message
            current_app.logger.warning(f"Login failed for {form.email.data}: {e.message}")
            flash(message or "Login failed", "danger")
            return render_template("auth/login.html", form=form)

        is_admin = bool(data.get("is_admin"))
        g.session_ctx.begin(data["access_token"], is_admin)
        current_app.logger.info(f"Login for {form.email.data} (admin={is_admin})")
        return redirect(resolve_landing(form.next.data, is_admin))

    return render_template("auth/login.html", form=form)


@bp.route("/register", methods=["GET", "POST"])
def register():
    """Create an organizer account."""
    form = RegisterForm()
    if form.validate_on_submit():
        try:
            get_api().post(
                "/auth/register",
                {"email": form.email.data.strip(), "password": form.password.data},
                auth=False,
            )
        except ApiError as e:
            current_app.logger.warning(f"Registration failed: {e.message}")
            flash(e.message, "danger")
            return render_template("auth/register.html", form=form)

        flash("Cuenta creada. Ya podes ingresar.", "success")
        return redirect(url_for(".login"))

    return render_template("auth/register.html", form=form)


@bp.route("/logout")
def logout():
    """Clear the session and go back to the login page."""
    g.session_ctx.clear()
    flash("Sesion cerrada.", "info")
    return redirect(url_for(".login"))


@bp.route("/forgot-password", methods=["GET", "POST"])
def forgot_password():
    """Ask the API to email a password reset link."""
    form = ForgotPasswordForm()
    if form.validate_on_submit():
        try:
            data = get_api().post(
                "/auth/forgot-password",
                {"email": form.email.data.strip()},
                auth=False,
            )
        except ApiError as e:
            flash(e.message or "No se pudo enviar el email", "danger")
            return render_template("auth/forgot_password.html", form=form)

        message = (data or {}).get("message") if isinstance(data, dict) else None
        flash(message or "Te enviamos un link para restablecer tu contrasena.", "success")
        return redirect(url_for(".forgot_password"))

    return render_template("auth/forgot_password.html", form=form)


@bp.route("/reset-password", methods=["GET", "POST"])
def reset_password():
    """Choose a new password with the token from the emailed link."""
    form = ResetPasswordForm()
    if request.method == "GET":
        token = request.args.get("token")
        if not token:
            return redirect(url_for(".forgot_password"))
        form.token.data = token

    if form.validate_on_submit():
        try:
            data = get_api().post(
                "/auth/reset-password",
                {"token": form.token.data, "password": form.password.data.strip()},
                auth=False,
            )
        except ApiError as e:
            current_app.logger.warning(f"Password reset failed: {e.message}")
            flash(reset_error_message(e.message), "danger")
            return render_template("auth/reset_password.html", form=form)

        message = (data or {}).get("message") if isinstance(data, dict) else None
        return render_template(
            "auth/reset_password.html",
            form=None,
            success=message or "Contrasena actualizada.",
            redirect_url=url_for(".login"),
            redirect_delay=current_app.config["RESET_REDIRECT_DELAY"],
        )

    return render_template("auth/reset_password.html", form=form)
