"""
Rate limiting configuration for the portfolio API
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address


def get_real_ip(request: Request) -> str:
    """
    Get the real IP address, considering proxy headers.
    Needed when the API runs behind a load balancer or edge proxy.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return get_remote_address(request)


# Rate limits for public endpoints that write or check credentials
RATE_LIMITS = {
    "login": "5/minute",            # Credential guessing
    "contact_create": "5/minute",   # Contact form spam
}

RATE_LIMIT_MESSAGE = "Too many requests. Please wait a moment and try again."

# Shared limiter; the application factory toggles `enabled` from settings
limiter = Limiter(key_func=get_real_ip)
