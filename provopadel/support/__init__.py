"""Support blueprint: the organizer's help tickets."""

from flask import Blueprint

bp = Blueprint("support", __name__, url_prefix="/support")

from . import routes  # noqa: E402, F401
from .services import SupportService  # noqa: E402

__all__ = ["SupportService", "routes"]
