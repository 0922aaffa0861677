"""Decorators for the auth blueprint."""

from functools import wraps

from flask import g, redirect, request, url_for

from provopadel.core.session import SessionContext


def login_required(f=None, admin_required=False):
    """Redirect to the login page if there is no session token.

    Organizer views send admin sessions to the admin dashboard, and admin
    views send organizer sessions to their dashboard.

    Usage:
    @login_required
    def organizer_view():
        ...

    @login_required(admin_required=True)
    def admin_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            session_ctx = getattr(g, "session_ctx", None) or SessionContext.load()
            if not session_ctx.is_authenticated:
                return redirect(url_for("auth.login", next=request.path))
            if admin_required and not session_ctx.is_admin:
                return redirect(url_for("user.dashboard"))
            if not admin_required and session_ctx.is_admin:
                return redirect(url_for("admin.dashboard"))
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator
