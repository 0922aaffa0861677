"""Tests for the REST API client."""

import json
import unittest

import httpx

from provopadel.api.client import ApiClient
from provopadel.constants import SESSION_IS_ADMIN, SESSION_TOKEN
from provopadel.core.session import SessionContext
from provopadel.errors import ApiError


def client_for(handler, store=None):
    if store is None:
        store = {SESSION_TOKEN: "abc", SESSION_IS_ADMIN: False}
    ctx = SessionContext.load(store)
    return ApiClient("http://api.test/", session_ctx=ctx, transport=httpx.MockTransport(handler)), store


class ApiClientTestCase(unittest.TestCase):
    def test_bearer_token_is_sent(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(200, json=[{"id": 1}])

        api, _ = client_for(handler)
        self.assertEqual(api.get("/tournaments"), [{"id": 1}])
        self.assertEqual(seen["auth"], "Bearer abc")
        self.assertEqual(seen["url"], "http://api.test/tournaments")

    def test_public_calls_send_no_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={})

        api, _ = client_for(handler)
        api.get("/public/tournaments/1", auth=False)
        self.assertIsNone(seen["auth"])

    def test_json_and_form_bodies(self):
        bodies = []

        def handler(request):
            bodies.append((request.headers.get("Content-Type"), request.content.decode()))
            return httpx.Response(200, json={"ok": True})

        api, _ = client_for(handler)
        api.post("/matches/1/result", {"sets": [{"a": 6, "b": 4}]})
        api.post("/auth/login", form={"username": "a@b.com", "password": "x"}, auth=False)
        self.assertEqual(bodies[0][0], "application/json")
        self.assertEqual(json.loads(bodies[0][1]), {"sets": [{"a": 6, "b": 4}]})
        self.assertTrue(bodies[1][0].startswith("application/x-www-form-urlencoded"))
        self.assertIn("username=a%40b.com", bodies[1][1])

    def test_empty_body_is_none(self):
        api, _ = client_for(lambda request: httpx.Response(204))
        self.assertIsNone(api.delete("/players/1"))

    def test_unauthorized_clears_the_session(self):
        api, store = client_for(
            lambda request: httpx.Response(401, json={"detail": "Could not validate credentials"})
        )
        with self.assertRaises(ApiError) as ctx:
            api.get("/tournaments")
        self.assertEqual(ctx.exception.status, 401)
        self.assertTrue(ctx.exception.is_unauthorized)
        self.assertEqual(ctx.exception.details, {"detail": "Could not validate credentials"})
        self.assertNotIn(SESSION_TOKEN, store)
        self.assertFalse(api.session_ctx.is_authenticated)

    def test_error_message_prefers_message_then_detail(self):
        api, store = client_for(
            lambda request: httpx.Response(400, json={"message": "Torneo iniciado", "detail": "x"})
        )
        with self.assertRaises(ApiError) as ctx:
            api.post("/tournaments/1/start")
        self.assertEqual(ctx.exception.message, "Torneo iniciado")
        self.assertIn(SESSION_TOKEN, store)

    def test_validation_detail_list_is_joined(self):
        body = {"detail": [{"loc": ["body", "name"], "msg": "field required"}, {"msg": "bad"}]}
        api, _ = client_for(lambda request: httpx.Response(422, json=body))
        with self.assertRaises(ApiError) as ctx:
            api.post("/tournaments", {})
        self.assertEqual(ctx.exception.message, "field required; bad")

    def test_error_without_body_has_generic_message(self):
        api, _ = client_for(lambda request: httpx.Response(500, text=""))
        with self.assertRaises(ApiError) as ctx:
            api.get("/tournaments")
        self.assertEqual(ctx.exception.message, "Request failed (500)")

    def test_request_maybe_turns_404_into_none(self):
        api, _ = client_for(lambda request: httpx.Response(404, json={"detail": "Not Found"}))
        self.assertIsNone(api.request_maybe("/tournaments/1/groups"))

    def test_request_maybe_still_raises_other_errors(self):
        api, _ = client_for(lambda request: httpx.Response(403, json={"detail": "Forbidden"}))
        with self.assertRaises(ApiError) as ctx:
            api.request_maybe("/tournaments/1/groups")
        self.assertTrue(ctx.exception.is_forbidden)


class SessionContextTestCase(unittest.TestCase):
    def test_begin_and_clear_write_through_to_the_store(self):
        store = {}
        ctx = SessionContext.load(store)
        self.assertFalse(ctx.is_authenticated)
        ctx.begin("tok", is_admin=True)
        self.assertEqual(store, {SESSION_TOKEN: "tok", SESSION_IS_ADMIN: True})
        ctx.clear()
        self.assertEqual(store, {})
        self.assertFalse(ctx.is_admin)


if __name__ == "__main__":
    unittest.main()
