"""Group blueprint: standings tables."""

from flask import Blueprint

bp = Blueprint("group", __name__, url_prefix="/groups")

from . import routes  # noqa: E402, F401

__all__ = ["routes"]
