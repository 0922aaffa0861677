"""Viewer blueprint: the public, read-only tournament page."""

from flask import Blueprint

bp = Blueprint("viewer", __name__, url_prefix="/viewer")

from . import routes  # noqa: E402, F401
from .services import ViewerService  # noqa: E402

__all__ = ["ViewerService", "routes"]
