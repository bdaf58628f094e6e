"""Security utilities for JWT session tokens and credential checks."""

import hmac
from datetime import datetime, timedelta, timezone

import jwt

from agenda.core.config import settings


# =============================================================================
# Session Token (JWT in cookie)
# =============================================================================

def create_session_token(principal: str) -> str:
    """
    Create signed session JWT.

    Always signs with current secret (JWT_SECRET).
    """
    payload = {
        "sub": principal,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """
    Decode and verify session JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


def verify_admin_credentials(username: str, password: str) -> bool:
    """Constant-time comparison against the configured admin principal."""
    user_ok = hmac.compare_digest(username.encode(), settings.ADMIN_USERNAME.encode())
    password_ok = hmac.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
    return user_ok and password_ok
