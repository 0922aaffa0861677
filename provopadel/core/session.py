"""Explicit session context shared by the API client and the route guard."""

from __future__ import annotations

from typing import Any, MutableMapping

from flask import session

from provopadel.constants import SESSION_IS_ADMIN, SESSION_TOKEN


class SessionContext:
    """Bearer token and admin flag for the current browser session.

    Login is the only place that calls :meth:`begin`; logout and any 401 from
    the API are the only places that call :meth:`clear`.
    """

    def __init__(
        self,
        token: str | None = None,
        is_admin: bool = False,
        store: MutableMapping[str, Any] | None = None,
    ) -> None:
        self.token = token
        self.is_admin = is_admin
        self._store = store

    @classmethod
    def load(cls, store: MutableMapping[str, Any] | None = None) -> SessionContext:
        """Build a context from the Flask session (or the given mapping)."""
        if store is None:
            store = session
        return cls(
            token=store.get(SESSION_TOKEN),
            is_admin=bool(store.get(SESSION_IS_ADMIN, False)),
            store=store,
        )

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def begin(self, token: str, is_admin: bool = False) -> None:
        """Start an authenticated session."""
        self.token = token
        self.is_admin = bool(is_admin)
        if self._store is not None:
            self._store[SESSION_TOKEN] = token
            self._store[SESSION_IS_ADMIN] = self.is_admin

    def clear(self) -> None:
        """Drop the token and admin flag."""
        self.token = None
        self.is_admin = False
        if self._store is not None:
            self._store.pop(SESSION_TOKEN, None)
            self._store.pop(SESSION_IS_ADMIN, None)

    def __repr__(self) -> str:
        state = "authenticated" if self.is_authenticated else "anonymous"
        return f"<SessionContext {state} admin={self.is_admin}>"
