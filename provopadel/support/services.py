"""Support ticket calls and the helpers shared with the admin inbox."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from provopadel.api import ApiClient

STATUS_OPEN = "open"
STATUS_PENDING = "pending"
STATUS_CLOSED = "closed"

STATUS_LABELS = {
    STATUS_OPEN: "Abierto",
    STATUS_PENDING: "En espera",
    STATUS_CLOSED: "Cerrado",
}


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class SupportService:
    """Organizer-side ticket calls."""

    @staticmethod
    def list_tickets(api: ApiClient) -> list[dict[str, Any]]:
        return api.get("/support/tickets") or []

    @staticmethod
    def get_ticket(api: ApiClient, ticket_id: int) -> dict[str, Any]:
        return api.get(f"/support/tickets/{ticket_id}")

    @staticmethod
    def create_ticket(api: ApiClient, subject: str, message: str) -> dict[str, Any]:
        return api.post(
            "/support/tickets", {"subject": subject.strip(), "message": message.strip()}
        )

    @staticmethod
    def reply(api: ApiClient, ticket_id: int, body: str) -> dict[str, Any]:
        return api.post(f"/support/tickets/{ticket_id}/messages", {"body": body.strip()})

    @staticmethod
    def status_label(status: str | None) -> str:
        return STATUS_LABELS.get(status, STATUS_LABELS[STATUS_OPEN])

    @staticmethod
    def status_after_reply(status: str | None, by_admin: bool) -> str:
        """Organizer replies reopen a ticket; admin replies park it unless closed."""
        if not by_admin:
            return STATUS_OPEN
        return STATUS_CLOSED if status == STATUS_CLOSED else STATUS_PENDING

    @staticmethod
    def first_response_minutes(messages: list[dict[str, Any]] | None) -> int | None:
        """Minutes from the first user message to the first admin message."""
        messages = messages or []
        first_user = next((m for m in messages if m.get("author_type") == "user"), None)
        first_admin = next((m for m in messages if m.get("author_type") == "admin"), None)
        if not first_user or not first_admin:
            return None
        start = _parse_timestamp(first_user.get("created_at"))
        end = _parse_timestamp(first_admin.get("created_at"))
        if start is None or end is None or end < start:
            return None
        return round((end - start).total_seconds() / 60)

    @staticmethod
    def status_counts(tickets: list[dict[str, Any]]) -> dict[str, int]:
        counts = {STATUS_OPEN: 0, STATUS_PENDING: 0, STATUS_CLOSED: 0}
        for ticket in tickets:
            if ticket.get("status") in counts:
                counts[ticket["status"]] += 1
        return counts

    @staticmethod
    def sort_tickets(
        tickets: list[dict[str, Any]], status: str, descending: bool = True
    ) -> list[dict[str, Any]]:
        """Tickets with one status, by last activity then id."""
        filtered = [t for t in tickets if t.get("status") == status]
        return sorted(
            filtered,
            key=lambda t: (t.get("last_message_at") or t.get("updated_at") or "", t["id"]),
            reverse=descending,
        )

    @staticmethod
    def parse_tags(value: str | None) -> list[str]:
        return [tag.strip() for tag in (value or "").split(",") if tag.strip()]
