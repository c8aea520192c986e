"""
Admin credential verification.

The admin identity comes from configuration. Values are compared and
never logged.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


def constant_time_compare(a: str, b: str) -> bool:
    """
    Compare two strings in time independent of where they first differ.

    Length is not treated as secret, so unequal lengths return early.
    """
    if len(a) != len(b):
        return False

    result = 0
    for x, y in zip(a, b):
        result |= ord(x) ^ ord(y)

    return result == 0


class CredentialVerifier:
    """Checks submitted email/password against the configured admin"""

    def __init__(self, admin_email: Optional[str], admin_password: Optional[str]):
        self._admin_email = admin_email
        self._admin_password = admin_password

    def verify_email(self, candidate: str) -> bool:
        """Case-insensitive, whitespace-trimmed comparison"""
        if not self._admin_email:
            logger.error("ADMIN_EMAIL is not configured")
            return False

        return candidate.strip().lower() == self._admin_email.strip().lower()

    def verify_password(self, candidate: str) -> bool:
        if not self._admin_password:
            logger.error("ADMIN_PASSWORD is not configured")
            return False

        return constant_time_compare(candidate, self._admin_password)
