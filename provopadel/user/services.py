"""Service layer for the organizer's own data."""

from __future__ import annotations

from typing import Any

from provopadel.api import ApiClient
from provopadel.constants import STATUS_ONGOING


def _blank_to_none(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


class UserService:
    """Calls behind the dashboard, profile and player pages."""

    @staticmethod
    def dashboard_stats(api: ApiClient) -> dict[str, int]:
        """Count tournaments, players and tournaments currently in play."""
        tournaments = api.get("/tournaments") or []
        players = api.get("/players") or []
        statuses = [
            (api.get(f"/tournaments/{t['id']}/status") or {}).get("status")
            for t in tournaments
        ]
        return {
            "ongoing": sum(1 for s in statuses if s == STATUS_ONGOING),
            "tournaments": len(tournaments),
            "players": len(players),
        }

    @staticmethod
    def get_profile(api: ApiClient) -> dict[str, Any]:
        return api.get("/profile") or {}

    @staticmethod
    def update_profile(
        api: ApiClient, club_name: str | None, club_location: str | None
    ) -> dict[str, Any]:
        return api.put(
            "/profile",
            {
                "club_name": _blank_to_none(club_name),
                "club_location": _blank_to_none(club_location),
            },
        )

    @staticmethod
    def list_players(api: ApiClient) -> list[dict[str, Any]]:
        players = api.get("/players") or []
        return sorted(players, key=lambda p: (p.get("first_name") or "").lower())

    @staticmethod
    def player_payload(form: Any) -> dict[str, str]:
        return {
            "first_name": form.first_name.data.strip(),
            "last_name": form.last_name.data.strip(),
            "category": form.category.data,
        }
