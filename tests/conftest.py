"""Common utilities for tests."""

import io
import json
from typing import Any, Optional

import httpx
import openpyxl

from provopadel import create_app
from provopadel.constants import SESSION_IS_ADMIN, SESSION_TOKEN

API_BASE_URL = "http://api.test"


class FakeApi:
    """Canned REST API served through ``httpx.MockTransport``.

    Routes are registered per ``(method, path)``; anything unregistered
    answers 404. Every request is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def on(self, method: str, path: str, json_body: Any = None, status: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status, json_body)

    def on_call(self, method: str, path: str, handler) -> None:
        """Answer with ``handler(request)``, which returns ``(status, body)``."""
        self.routes[(method.upper(), path)] = handler

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        status, body = route(request) if callable(route) else route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.calls if r.method == method.upper() and r.url.path == path
        ]

    def last_json(self, method: str, path: str) -> Optional[Any]:
        sent = self.requests_to(method, path)
        if not sent:
            return None
        return json.loads(sent[-1].content)


def make_app(fake_api: FakeApi, **config: Any):
    """App wired to the fake API, with CSRF off."""
    settings = {
        "TESTING": True,
        "WTF_CSRF_ENABLED": False,
        "SECRET_KEY": "test",
        "API_BASE_URL": API_BASE_URL,
        "API_TRANSPORT": fake_api.transport,
        "SERVER_NAME": "localhost",
    }
    settings.update(config)
    return create_app(settings)


def login_session(client, token: str = "tok", is_admin: bool = False) -> None:
    """Put a bearer token straight into the test client's session."""
    with client.session_transaction() as sess:
        sess[SESSION_TOKEN] = token
        sess[SESSION_IS_ADMIN] = is_admin


def make_tournament(tournament_id: int = 1, **overrides: Any) -> dict:
    tournament = {
        "id": tournament_id,
        "name": "Copa Provo",
        "location": "Club Norte",
        "start_time": "09:00",
        "end_time": "12:00",
        "match_duration_minutes": 60,
        "courts_count": 2,
    }
    tournament.update(overrides)
    return tournament


def make_team(team_id: int, first: str, second: str, category="5ta", gender="damas") -> dict:
    return {
        "id": team_id,
        "players": [
            {"id": team_id * 10 + 1, "name": first, "category": category, "gender": gender},
            {"id": team_id * 10 + 2, "name": second, "category": category, "gender": gender},
        ],
        "schedule_constraints": None,
    }


def make_match(match_id: int, **overrides: Any) -> dict:
    match = {
        "id": match_id,
        "tournament_id": 1,
        "stage": "group",
        "group_id": 1,
        "team_a_id": 1,
        "team_b_id": 2,
        "sets": None,
        "status": "pending",
        "scheduled_time": None,
        "court_number": None,
    }
    match.update(overrides)
    return match


def register_tournament(fake_api: FakeApi, tournament: dict, status="ongoing", **collections) -> None:
    """Serve one tournament with its status and per-tournament lists."""
    tid = tournament["id"]
    fake_api.on("GET", "/tournaments", [tournament])
    fake_api.on("GET", f"/tournaments/{tid}/status", {"status": status})
    for name in ("players", "teams", "groups", "matches"):
        if name in collections:
            fake_api.on("GET", f"/tournaments/{tid}/{name}", collections[name])


def make_workbook(rows: list[list[Any]]) -> bytes:
    """An in-memory ``.xlsx`` file with one sheet holding ``rows``."""
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
