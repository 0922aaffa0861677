"""Tests for the admin backoffice."""

import unittest

from provopadel.admin.services import AdminService
from tests.conftest import FakeApi, login_session, make_app

USERS = [
    {"id": 5, "email": "club@example.com", "club_name": "Club Norte", "status": "active"},
    {"id": 6, "email": "otro@example.com", "club_name": None, "status": "inactive"},
]


class AdminServiceTestCase(unittest.TestCase):
    def test_chart_bars_scale_to_the_peak_with_a_floor(self):
        bars = AdminService.chart_bars(
            [
                {"date": "2026-03-01", "total": 0},
                {"date": "2026-03-02", "total": 50},
                {"date": "2026-03-03", "total": 100},
            ]
        )
        self.assertEqual([b["height"] for b in bars], [4, 50, 100])

    def test_chart_bars_without_data(self):
        self.assertEqual(AdminService.chart_bars([]), [])
        self.assertEqual(AdminService.chart_bars([{"date": "d", "count": 0}])[0]["height"], 4)

    def test_payments_newest_first_then_highest_id(self):
        payments = [
            {"id": 1, "paid_at": "2026-01-10"},
            {"id": 3, "paid_at": "2026-02-01"},
            {"id": 2, "paid_at": "2026-02-01"},
        ]
        self.assertEqual([p["id"] for p in AdminService.sort_payments(payments)], [3, 2, 1])


class AdminRoutesTestCase(unittest.TestCase):
    def setUp(self):
        self.api = FakeApi()
        self.app = make_app(self.api)
        self.client = self.app.test_client()
        login_session(self.client, is_admin=True)
        self.api.on("GET", "/admin/users", USERS)

    def flashes(self):
        with self.client.session_transaction() as sess:
            return [message for _, message in sess.get("_flashes", [])]

    def test_dashboard(self):
        self.api.on("GET", "/admin/metrics", {"users_total": 12})
        self.api.on("GET", "/admin/payments/last-30-days", {"series": [{"date": "2026-03-01", "total": 10}]})
        response = self.client.get("/admin/")
        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Users total", response.data)
        self.assertIn(b"height: 100.0%", response.data)

    def test_forbidden_api_renders_restricted_page(self):
        self.api.on("GET", "/admin/users", {"detail": "Admin only"}, status=403)
        response = self.client.get("/admin/users")
        self.assertEqual(response.status_code, 403)
        self.assertIn(b"Acceso restringido", response.data)

    def test_forbidden_on_create_is_not_flashed(self):
        self.api.on("POST", "/admin/users", {"detail": "Admin only"}, status=403)
        response = self.client.post(
            "/admin/users", data={"email": "new@example.com", "password": "secret1"}
        )
        self.assertEqual(response.status_code, 403)

    def test_create_user(self):
        self.api.on("POST", "/admin/users", {"id": 7})
        self.client.post(
            "/admin/users",
            data={"email": "new@example.com", "password": "secret1", "club_name": "Club Sur"},
        )
        self.assertEqual(
            self.api.last_json("POST", "/admin/users"),
            {
                "email": "new@example.com",
                "club_name": "Club Sur",
                "club_location": None,
                "club_logo_url": None,
                "password": "secret1",
            },
        )

    def test_edit_user_keeps_password_when_blank(self):
        self.api.on("PUT", "/admin/users/5", {"id": 5})
        self.client.post(
            "/admin/users/5/edit",
            data={"email": "club@example.com", "password": "", "status_override": "inactive"},
        )
        body = self.api.last_json("PUT", "/admin/users/5")
        self.assertNotIn("password", body)
        self.assertEqual(body["status_override"], "inactive")

    def test_record_payment(self):
        self.api.on("POST", "/admin/payments", {"id": 1})
        self.client.post(
            "/admin/payments",
            data={"user_id": "5", "paid_at": "2026-03-01", "plan_months": "3", "amount": "1500.50"},
        )
        self.assertEqual(
            self.api.last_json("POST", "/admin/payments"),
            {
                "user_id": 5,
                "paid_at": "2026-03-01",
                "currency": "ARS",
                "notes": None,
                "plan_months": 3,
                "amount": 1500.5,
            },
        )
        self.assertEqual(self.flashes(), ["Pago registrado."])

    def test_payments_page_lists_newest_first(self):
        self.api.on(
            "GET",
            "/admin/payments",
            [
                {"id": 1, "user_id": 5, "paid_at": "2026-01-01", "amount": 10},
                {"id": 2, "user_id": 6, "paid_at": "2026-02-01", "amount": 20},
            ],
        )
        html = self.client.get("/admin/payments").data.decode()
        self.assertLess(html.index("2026-02-01"), html.index("2026-01-01"))
        self.assertIn("Club Norte", html)

    def test_support_inbox_filters_by_status(self):
        self.api.on(
            "GET",
            "/admin/support/tickets",
            [
                {"id": 1, "subject": "Pago doble", "status": "open", "updated_at": "2026-03-01"},
                {"id": 2, "subject": "No veo la grilla", "status": "pending", "updated_at": "2026-03-02"},
            ],
        )
        html = self.client.get("/admin/support?status=pending").data.decode()
        self.assertIn("No veo la grilla", html)
        self.assertNotIn("Pago doble", html)
        self.assertIn("Abierto (1)", html)

    def test_reply_parks_the_ticket(self):
        self.api.on("POST", "/admin/support/tickets/4/messages", {"id": 9})
        self.client.post(
            "/admin/support/4/reply",
            data={"body": "Ya esta resuelto", "current_status": "open"},
        )
        self.assertEqual(self.flashes(), ["Respuesta enviada. Estado: En espera."])
        self.assertEqual(
            self.api.last_json("POST", "/admin/support/tickets/4/messages"),
            {"body": "Ya esta resuelto"},
        )


if __name__ == "__main__":
    unittest.main()
