"""Match blueprint: schedule grid, match list, playoffs and results."""

from flask import Blueprint

bp = Blueprint("match", __name__)

from . import routes  # noqa: E402, F401
from .services import MatchService  # noqa: E402

__all__ = ["MatchService", "routes"]
