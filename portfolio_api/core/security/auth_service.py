"""
Admin login and logout.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from portfolio_api.core.security.credentials import CredentialVerifier
from portfolio_api.core.security.session_security import SessionStore

logger = logging.getLogger(__name__)

ADMIN_USER_ID = "admin"
MISSING_CREDENTIALS = "Email and password are required"
INVALID_CREDENTIALS = "Invalid credentials"


@dataclass
class LoginResult:
    """Outcome of a login attempt"""
    success: bool
    token: Optional[str] = None
    error: Optional[str] = None


class AuthService:
    """
    Orchestrates login (verify credentials, create session) and logout.

    Wrong email and wrong password produce the same error so callers
    cannot tell which one was wrong.
    """

    def __init__(self, verifier: CredentialVerifier, sessions: SessionStore):
        self.verifier = verifier
        self.sessions = sessions

    async def login(self, email: Optional[str], password: Optional[str]) -> LoginResult:
        if not email or not password:
            return LoginResult(success=False, error=MISSING_CREDENTIALS)

        if not self.verifier.verify_email(email):
            logger.warning("❌ Failed admin login attempt")
            return LoginResult(success=False, error=INVALID_CREDENTIALS)

        if not self.verifier.verify_password(password):
            logger.warning("❌ Failed admin login attempt")
            return LoginResult(success=False, error=INVALID_CREDENTIALS)

        token = await self.sessions.create_session(ADMIN_USER_ID)
        logger.info("✅ Admin logged in")
        return LoginResult(success=True, token=token)

    async def logout(self, token: Optional[str]) -> None:
        """Revoke the session. Safe to call with an unknown or empty token."""
        if token:
            await self.sessions.clear_session(token)
