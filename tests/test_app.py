"""Tests for app wiring: CORS and OPTIONS handling, error shaping and health."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from cms.main import create_app
from tests.helpers import ApiTestCase, make_settings


class TestPreflight(ApiTestCase):
    """Every OPTIONS request gets an empty 204 carrying the CORS headers."""

    def test_options_on_any_path(self) -> None:
        for path in ("/auth/login", "/posts/abc/comments", "/does/not/exist"):
            with self.subTest(path=path):
                response = self.client.options(path)
                self.assertEqual(response.status_code, 204)
                self.assertEqual(response.content, b"")
                self.assertEqual(response.headers["access-control-allow-origin"], "*")
                allowed = response.headers["access-control-allow-headers"]
                for header in ("Content-Type", "Authorization", "x-user-id"):
                    self.assertIn(header, allowed)
                self.assertEqual(
                    response.headers["access-control-allow-methods"], "GET, POST, PUT, DELETE, OPTIONS"
                )

    def test_browser_preflight_needs_no_token(self) -> None:
        response = self.client.options(
            "/admin/users/profile",
            headers={
                "Origin": "https://blog.example.com",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "authorization",
            },
        )
        self.assertEqual(response.status_code, 204)


class TestCorsHeaders(ApiTestCase):
    """Regular responses, including errors, carry the allow-origin header."""

    def test_success_and_error_responses(self) -> None:
        origin = {"Origin": "https://blog.example.com"}
        ok = self.client.get("/posts", headers=origin)
        self.assertEqual(ok.headers["access-control-allow-origin"], "*")
        denied = self.client.get("/admin/users/profile", headers=origin)
        self.assertEqual(denied.status_code, 401)
        self.assertEqual(denied.headers["access-control-allow-origin"], "*")


class TestRestrictedOrigins(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.settings = make_settings(
            DATABASE_URL=self.settings.DATABASE_URL,
            CORS_ALLOW_ORIGINS=["https://blog.example.com"],
        )
        self.client.close()
        self.client = TestClient(create_app(self.settings, self.database))

    def test_unexpected_error_echoes_listed_origin(self) -> None:
        with patch("cms.services.posts.get_post", side_effect=RuntimeError("boom")):
            response = self.client.get("/posts/x", headers={"Origin": "https://blog.example.com"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.headers["access-control-allow-origin"], "https://blog.example.com")
        self.assertEqual(response.headers["vary"], "Origin")

    def test_only_listed_origin_is_echoed(self) -> None:
        allowed = self.client.options("/posts", headers={"Origin": "https://blog.example.com"})
        self.assertEqual(allowed.headers["access-control-allow-origin"], "https://blog.example.com")
        other = self.client.options("/posts", headers={"Origin": "https://evil.example.com"})
        self.assertEqual(other.status_code, 204)
        self.assertNotIn("access-control-allow-origin", other.headers)


class TestErrorShape(ApiTestCase):
    """Errors leave the API as {"error": message}."""

    def test_unknown_route(self) -> None:
        response = self.client.get("/no-such-route")
        self.assertEqual(response.status_code, 404)
        self.assertIn("error", response.json())

    def test_unexpected_exception_is_opaque_500(self) -> None:
        client = TestClient(self.app, raise_server_exceptions=False)
        with patch("cms.services.posts.list_posts", side_effect=RuntimeError("db exploded")):
            response = client.get("/posts", headers={"Origin": "https://blog.example.com"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Internal server error"})
        self.assertEqual(response.headers["access-control-allow-origin"], "*")
        client.close()

    def test_unexpected_exception_with_default_client(self) -> None:
        with patch("cms.services.posts.get_post", side_effect=RuntimeError("boom")):
            response = self.client.get("/posts/x", headers={"Origin": "https://blog.example.com"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.headers["access-control-allow-origin"], "*")

    def test_query_parameter_error_is_not_called_a_body_error(self) -> None:
        response = self.client.get("/posts", params={"limit": 0})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid request"})

    def test_body_error_keeps_body_message(self) -> None:
        response = self.client.post(
            "/auth/login", content=b"[1,", headers={"Content-Type": "application/json"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid request body"})


class TestHealth(ApiTestCase):
    def test_health_reports_database(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"status": "ok", "service": "txtme-cms", "environment": "test", "database": "connected"},
        )


if __name__ == "__main__":
    unittest.main()
