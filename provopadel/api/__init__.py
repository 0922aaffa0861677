"""Access to the tournament REST API."""

from flask import current_app, g

from provopadel.core.session import SessionContext

from .client import ApiClient


def get_api() -> ApiClient:
    """Return the API client for the current request."""
    if "api" not in g:
        session_ctx = getattr(g, "session_ctx", None) or SessionContext.load()
        g.api = ApiClient(
            current_app.config["API_BASE_URL"],
            session_ctx=session_ctx,
            timeout=current_app.config["API_TIMEOUT"],
            transport=current_app.config.get("API_TRANSPORT"),
        )
    return g.api


__all__ = ["ApiClient", "get_api"]
