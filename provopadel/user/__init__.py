"""User blueprint: the organizer's dashboard, profile and players."""

from flask import Blueprint

bp = Blueprint("user", __name__)

from . import routes  # noqa: E402, F401
from .services import UserService  # noqa: E402

__all__ = ["UserService", "routes"]
