"""
Security module for the portfolio API.

Centralizes admin authentication:
- Credential verification
- Session tokens with expiry
- Login/logout
- Per-request authorization

Content services stay unaware of it; routes opt in through the
``require_admin`` dependency.
"""

from .credentials import CredentialVerifier, constant_time_compare
from .session_security import Session, SessionStore, SESSION_TTL_SECONDS
from .auth_service import AuthService, LoginResult
from .authorizer import (
    AuthResult,
    RequestAuthorizer,
    SESSION_COOKIE_NAME,
    extract_token,
    require_admin
)

__all__ = [
    'CredentialVerifier',
    'constant_time_compare',
    'Session',
    'SessionStore',
    'SESSION_TTL_SECONDS',
    'AuthService',
    'LoginResult',
    'AuthResult',
    'RequestAuthorizer',
    'SESSION_COOKIE_NAME',
    'extract_token',
    'require_admin'
]
