"""Routes for the group blueprint."""

from __future__ import annotations

from typing import Any

from flask import render_template, request

from provopadel.api import get_api
from provopadel.auth.decorators import login_required
from provopadel.utils import is_safe_next

from . import bp
from .standings import standings_table


@bp.route("/<int:group_id>/standings")
@login_required
def standings(group_id: int) -> Any:
    """Render one group's table."""
    data = get_api().get(f"/groups/{group_id}/standings") or {}
    back = request.args.get("back")
    return render_template(
        "group/standings.html",
        group_name=data.get("group_name") or "Grupo",
        rows=standings_table(data.get("standings")),
        back_url=back if is_safe_next(back) else None,
    )
