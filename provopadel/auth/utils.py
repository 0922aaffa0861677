"""Utility functions for the auth blueprint."""

from __future__ import annotations

from provopadel.utils import is_safe_next

ADMIN_LANDING = "/admin"
ORGANIZER_LANDING = "/dashboard"


def resolve_landing(next_path: str | None, is_admin: bool) -> str:
    """Pick where to send a freshly logged-in session.

    Organizers never land under /admin, and admins asking for the organizer
    dashboard are sent to theirs instead.
    """
    target = next_path if is_safe_next(next_path) else None
    if not target:
        target = ADMIN_LANDING if is_admin else ORGANIZER_LANDING

    if not is_admin and target.startswith(ADMIN_LANDING):
        target = ORGANIZER_LANDING
    if is_admin and target == ORGANIZER_LANDING:
        target = ADMIN_LANDING
    return target


def reset_error_message(message: str | None) -> str:
    """Token problems get one friendly message, anything else passes through."""
    if message and "token" in message.lower():
        return "El link es invalido o ya vencio. Pedi uno nuevo desde esta misma pantalla."
    return message or "No se pudo actualizar la contrasena."
