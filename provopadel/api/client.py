import json
import logging
from typing import Any

import httpx

from provopadel.core.session import SessionContext
from provopadel.errors import ApiError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


def _parse_body(response: httpx.Response) -> Any:
    text = response.text
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


def _error_message(data: Any, status: int) -> str:
    """Pick the human message out of an error body."""
    if isinstance(data, dict):
        message = data.get("message") or data.get("detail")
        if isinstance(message, list):
            # FastAPI-style validation errors: [{"loc": ..., "msg": ...}, ...]
            parts = [
                item.get("msg", str(item)) if isinstance(item, dict) else str(item)
                for item in message
            ]
            message = "; ".join(parts)
        if message:
            return str(message)
    return f"Request failed ({status})"


class ApiClient:
    """Thin client for the tournament REST API."""

    def __init__(
        self,
        base_url: str,
        session_ctx: SessionContext | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.session_ctx = session_ctx or SessionContext()
        self.timeout = timeout
        self.transport = transport

    def _headers(self, auth: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if auth and self.session_ctx.token:
            headers["Authorization"] = f"Bearer {self.session_ctx.token}"
        return headers

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        auth: bool = True,
        form: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Call the API and return the parsed JSON body.

        Raises ApiError for every non-2xx response. A 401 also clears the
        session context before raising.
        """
        url = f"{self.base_url}{path}"
        kwargs: dict[str, Any] = {"headers": self._headers(auth), "params": params}
        if form is not None:
            kwargs["data"] = form
        elif body is not None:
            kwargs["json"] = body

        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.request(method, url, **kwargs)

        logger.debug(f"{method} {path} -> {response.status_code}")

        data = _parse_body(response)

        if response.status_code == 401:
            logger.warning(f"{method} {path} unauthorized, clearing session")
            self.session_ctx.clear()
            raise ApiError("Unauthorized", 401, data)

        if not response.is_success:
            message = _error_message(data, response.status_code)
            logger.warning(f"{method} {path} failed ({response.status_code}): {message}")
            raise ApiError(message, response.status_code, data)

        return data

    def request_maybe(self, path: str, **kwargs: Any) -> Any:
        """Like request(), but a 404 means "not created yet" and yields None."""
        try:
            return self.request(path, **kwargs)
        except ApiError as e:
            if e.is_not_found:
                return None
            raise

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request(path, method="GET", **kwargs)

    def post(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        return self.request(path, method="POST", body=body, **kwargs)

    def put(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        return self.request(path, method="PUT", body=body, **kwargs)

    def patch(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        return self.request(path, method="PATCH", body=body, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request(path, method="DELETE", **kwargs)
