# tests/core/test_authorizer.py
"""
Tests for token extraction and per-request authorization.
"""
from types import SimpleNamespace

import pytest
from starlette.requests import Request

from portfolio_api.core.exceptions import SecurityError
from portfolio_api.core.security import RequestAuthorizer, SessionStore, extract_token, require_admin


def make_request(headers=None, authorizer=None):
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/admin/stats",
        "headers": raw_headers,
        "query_string": b"",
        "app": SimpleNamespace(state=SimpleNamespace(authorizer=authorizer)),
    }
    return Request(scope)


@pytest.fixture
def sessions(store, fake_clock):
    return SessionStore(store, clock=fake_clock)


@pytest.fixture
def authorizer(sessions):
    return RequestAuthorizer(sessions)


class TestExtractToken:

    def test_cookie(self):
        assert extract_token({"admin-session": "abc"}, {}) == "abc"

    def test_bearer_header(self):
        assert extract_token({}, {"authorization": "Bearer xyz"}) == "xyz"

    def test_cookie_wins_over_header(self):
        assert extract_token({"admin-session": "abc"}, {"authorization": "Bearer xyz"}) == "abc"

    def test_non_bearer_scheme_ignored(self):
        assert extract_token({}, {"authorization": "Basic dXNlcjpwdw=="}) is None

    def test_empty_bearer(self):
        assert extract_token({}, {"authorization": "Bearer "}) is None

    def test_nothing(self):
        assert extract_token({}, {}) is None


class TestRequestAuthorizer:

    async def test_valid_cookie(self, authorizer, sessions):
        token = await sessions.create_session("admin")
        request = make_request({"Cookie": f"admin-session={token}"})

        result = await authorizer.verify_auth(request)

        assert result.authenticated is True
        assert result.token == token

    async def test_valid_bearer(self, authorizer, sessions):
        token = await sessions.create_session("admin")
        request = make_request({"Authorization": f"Bearer {token}"})

        assert (await authorizer.verify_auth(request)).authenticated is True

    async def test_unknown_token(self, authorizer):
        request = make_request({"Authorization": "Bearer " + "0" * 64})

        result = await authorizer.verify_auth(request)

        assert result.authenticated is False
        assert result.token is None

    async def test_no_credentials(self, authorizer):
        assert (await authorizer.verify_auth(make_request())).authenticated is False

    async def test_revoked_session(self, authorizer, sessions):
        token = await sessions.create_session("admin")
        await sessions.clear_session(token)

        request = make_request({"Cookie": f"admin-session={token}"})

        assert (await authorizer.verify_auth(request)).authenticated is False


class TestRequireAdmin:

    async def test_passes_with_session(self, authorizer, sessions):
        token = await sessions.create_session("admin")
        request = make_request({"Cookie": f"admin-session={token}"}, authorizer=authorizer)

        result = await require_admin(request)

        assert result.authenticated is True

    async def test_rejects_without_session(self, authorizer):
        request = make_request(authorizer=authorizer)

        with pytest.raises(SecurityError) as exc_info:
            await require_admin(request)

        assert exc_info.value.message == "Unauthorized"
        assert exc_info.value.error_type == "auth"
