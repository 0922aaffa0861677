"""Service layer for the admin backoffice."""

from __future__ import annotations

from typing import Any

from provopadel.api import ApiClient
from provopadel.constants import DEFAULT_CURRENCY

MIN_BAR_HEIGHT = 4


def _blank_to_none(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


class AdminService:
    """Calls and derivations behind the admin pages."""

    @staticmethod
    def dashboard(api: ApiClient) -> dict[str, Any]:
        metrics = api.get("/admin/metrics") or {}
        series = (api.get("/admin/payments/last-30-days") or {}).get("series") or []
        return {"metrics": metrics, "series": series}

    @staticmethod
    def chart_bars(series: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Bar heights as a percentage of the busiest day, with a visible floor."""
        values = [float(item.get("total", item.get("count")) or 0) for item in series]
        peak = max(values, default=0)
        bars = []
        for item, value in zip(series, values):
            height = (value / peak) * 100 if peak else 0
            bars.append(
                {
                    "date": item.get("date"),
                    "total": value,
                    "height": max(height, MIN_BAR_HEIGHT),
                }
            )
        return bars

    @staticmethod
    def user_payload(form: Any, creating: bool) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "email": form.email.data.strip(),
            "club_name": _blank_to_none(form.club_name.data),
            "club_location": _blank_to_none(form.club_location.data),
            "club_logo_url": _blank_to_none(form.club_logo_url.data),
        }
        if not creating:
            payload["status_override"] = form.status_override.data or None
        password = (form.password.data or "").strip()
        if creating or password:
            payload["password"] = password
        return payload

    @staticmethod
    def sort_payments(payments: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Most recent payment first, then highest id."""
        return sorted(
            payments,
            key=lambda p: (p.get("paid_at") or "", p["id"]),
            reverse=True,
        )

    @staticmethod
    def payment_payload(form: Any, creating: bool) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "user_id": form.user_id.data,
            "paid_at": form.paid_at.data.isoformat(),
            "currency": DEFAULT_CURRENCY,
            "notes": _blank_to_none(form.notes.data),
        }
        if creating:
            payload["plan_months"] = form.plan_months.data or 1
        elif form.plan_months.data:
            payload["plan_months"] = form.plan_months.data
        payload["amount"] = float(form.amount.data) if form.amount.data is not None else None
        if form.expires_at.data:
            payload["expires_at"] = form.expires_at.data.isoformat()
        return payload
