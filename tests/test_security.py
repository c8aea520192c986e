"""
Security tests for the portfolio API
Tests rate limiting, error sanitization, CORS and security headers
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from portfolio_api.core.config import Settings
from portfolio_api.core.exceptions import SecurityError, StoreError, ValidationError
from portfolio_api.core.rate_limit_config import RATE_LIMIT_MESSAGE, get_real_ip, limiter
from portfolio_api.main import GENERIC_ERROR_MESSAGE, create_app, get_safe_error_message
from portfolio_api.services.kv_store import InMemoryStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


def make_settings(**overrides):
    values = dict(
        ADMIN_EMAIL=ADMIN_EMAIL,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        STORE_BACKEND="memory",
        RATE_LIMIT_ENABLED=False,
        _env_file=None,
    )
    values.update(overrides)
    return Settings(**values)


class TestSecurityHeaders:

    def test_headers_present(self, client):
        response = client.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert "Strict-Transport-Security" not in response.headers

    def test_headers_on_errors(self, client):
        response = client.get("/api/admin/stats")

        assert response.status_code == 401
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_hsts_in_production(self):
        with TestClient(create_app(make_settings(ENVIRONMENT="production"), InMemoryStore())) as client:
            response = client.get("/")

        assert "max-age=31536000" in response.headers["Strict-Transport-Security"]

    def test_secure_cookie_in_production(self):
        with TestClient(create_app(make_settings(ENVIRONMENT="production"), InMemoryStore())) as client:
            response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        assert "Secure" in response.headers["set-cookie"]


class TestCORS:

    def test_localhost_allowed_in_development(self, client):
        response = client.options(
            "/api/admin/login",
            headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
        )

        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_localhost_blocked_in_production(self):
        config = make_settings(ENVIRONMENT="production", CORS_ORIGINS=["https://portfolio.example.com"])

        with TestClient(create_app(config, InMemoryStore())) as client:
            blocked = client.get("/", headers={"Origin": "http://localhost:3000"})
            allowed = client.get("/", headers={"Origin": "https://portfolio.example.com"})

        assert "access-control-allow-origin" not in blocked.headers
        assert allowed.headers["access-control-allow-origin"] == "https://portfolio.example.com"


class TestErrorSanitization:

    def test_store_error_message_is_generic(self):
        error = StoreError("Redis read failed: Connection refused to 10.0.0.5:6379", key="projects")

        message = get_safe_error_message(error, "test")

        assert message == GENERIC_ERROR_MESSAGE

    def test_validation_message_passes_through(self):
        assert get_safe_error_message(ValidationError("Projects must be an array")) == "Projects must be an array"

    def test_unknown_error(self):
        assert get_safe_error_message(RuntimeError("secret internals")) == GENERIC_ERROR_MESSAGE

    def test_security_error_is_unauthorized(self):
        error = SecurityError("session token abc123 expired", error_type="expiration")

        assert get_safe_error_message(error) == "Unauthorized"

    def test_store_failure_returns_500_without_details(self):
        failing_store = AsyncMock()
        failing_store.read.side_effect = StoreError("connection to redis://:pw@host failed", operation="read")

        with TestClient(create_app(make_settings(), failing_store)) as client:
            response = client.get("/api/portfolio/projects")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_store_failure_on_session_read_is_unauthorized(self):
        failing_store = AsyncMock()
        failing_store.read.side_effect = StoreError("down", operation="read")

        with TestClient(create_app(make_settings(), failing_store)) as client:
            response = client.get("/api/admin/stats", headers={"Authorization": "Bearer " + "a" * 64})

        assert response.status_code == 401


class TestRateLimiting:

    @pytest.fixture
    def limited_client(self):
        limiter.reset()
        with TestClient(create_app(make_settings(RATE_LIMIT_ENABLED=True), InMemoryStore())) as client:
            yield client
        limiter.reset()
        limiter.enabled = False

    def test_login_rate_limited(self, limited_client):
        for _ in range(5):
            response = limited_client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "wrong"})
            assert response.status_code == 401

        response = limited_client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "wrong"})

        assert response.status_code == 429
        assert response.json() == {"error": RATE_LIMIT_MESSAGE}
        assert response.headers["Retry-After"] == "60"

    def test_contact_form_rate_limited(self, limited_client):
        payload = {"name": "Spammer", "email": "spam@example.org", "subject": "Buy", "message": "Buy now, buy now!"}

        statuses = [
            limited_client.post("/api/admin/contact-messages", json=payload).status_code
            for _ in range(6)
        ]

        assert statuses == [201] * 5 + [429]

    def test_limits_are_per_client_ip(self, limited_client):
        for _ in range(5):
            limited_client.post(
                "/api/admin/login",
                json={"email": ADMIN_EMAIL, "password": "wrong"},
                headers={"X-Forwarded-For": "203.0.113.1"},
            )

        response = limited_client.post(
            "/api/admin/login",
            json={"email": ADMIN_EMAIL, "password": "wrong"},
            headers={"X-Forwarded-For": "203.0.113.2"},
        )

        assert response.status_code == 401


class TestRealIp:

    def _request(self, headers):
        from starlette.requests import Request

        raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
        return Request({"type": "http", "headers": raw, "client": ("10.0.0.1", 1234)})

    def test_forwarded_for_first_hop(self):
        assert get_real_ip(self._request({"X-Forwarded-For": "198.51.100.7, 10.0.0.2"})) == "198.51.100.7"

    def test_real_ip_header(self):
        assert get_real_ip(self._request({"X-Real-IP": "198.51.100.8"})) == "198.51.100.8"

    def test_falls_back_to_peer_address(self):
        assert get_real_ip(self._request({})) == "10.0.0.1"
