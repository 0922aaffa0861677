from flask import (
    Blueprint,
    current_app,
    flash,
    g,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_wtf.csrf import CSRFError

from .errors import ApiError, AppError, ForbiddenError, NotFoundError, ValidationError

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(ApiError)
def handle_api_error(error):
    """Handles API failures that no route dealt with locally."""
    if error.is_unauthorized:
        current_app.logger.warning(f"Session expired on {request.path}")
        session_ctx = getattr(g, "session_ctx", None)
        if session_ctx is not None:
            session_ctx.clear()
        return redirect(url_for("auth.login", next=request.full_path.rstrip("?")))
    if error.is_forbidden:
        current_app.logger.warning(f"API refused access to {request.path}")
        return render_template("restricted.html"), 403
    current_app.logger.error(f"API Error ({error.status}): {error.message}")
    status = error.status if 400 <= error.status < 600 else 502
    return render_template("error.html", error=error.message), status


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors by rendering a generic error page."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return render_template("error.html", error=error.message), error.status_code


@error_handlers_bp.app_errorhandler(ForbiddenError)
def handle_forbidden_error(error):
    """Handles access to pages the session may not see."""
    current_app.logger.warning(f"Forbidden: {request.path}")
    return render_template("restricted.html", error=error.message), 403


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return render_template("404.html", error=error.message), error.status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return render_template("error.html", error=error.message), error.status_code


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return render_template("404.html"), 404


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return render_template("500.html"), 500


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    Handles CSRF errors, which usually indicate a session timeout or invalid form submission.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    flash("Tu sesion puede haber expirado. Intenta de nuevo.", "warning")
    return redirect(request.referrer or url_for("index"))
