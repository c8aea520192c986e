"""
Request authorization for admin endpoints.

The session token travels in the ``admin-session`` cookie, or as a
bearer token for non-browser clients. Every request is re-verified
against the session store; decisions are never cached.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from fastapi import Request

from portfolio_api.core.exceptions import security_error
from portfolio_api.core.security.session_security import SessionStore

SESSION_COOKIE_NAME = "admin-session"
BEARER_PREFIX = "Bearer "


@dataclass
class AuthResult:
    """Authorization decision for one request"""
    authenticated: bool
    token: Optional[str] = None


def extract_token(cookies: Mapping[str, str], headers: Mapping[str, str]) -> Optional[str]:
    """Session token from the cookie, falling back to the Authorization header"""
    token = cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token

    auth_header = headers.get("authorization")
    if auth_header and auth_header.startswith(BEARER_PREFIX):
        return auth_header[len(BEARER_PREFIX):] or None

    return None


class RequestAuthorizer:
    """Decides whether a request carries a valid admin session"""

    def __init__(self, sessions: SessionStore):
        self.sessions = sessions

    async def verify_auth(self, request: Request) -> AuthResult:
        token = extract_token(request.cookies, request.headers)

        if not token:
            return AuthResult(authenticated=False)

        if not await self.sessions.verify_session(token):
            return AuthResult(authenticated=False)

        return AuthResult(authenticated=True, token=token)


async def require_admin(request: Request) -> AuthResult:
    """FastAPI dependency for protected routes. Raises SecurityError (401) unless authenticated."""
    authorizer: RequestAuthorizer = request.app.state.authorizer
    result = await authorizer.verify_auth(request)

    if not result.authenticated:
        raise security_error("Unauthorized", error_type="auth")

    return result
