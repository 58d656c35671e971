"""Session tokens issued after a completed OAuth login."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from pydantic import BaseModel

from app.core.config import get_settings

settings = get_settings()

ALGORITHM = "HS256"
SESSION_TTL = timedelta(days=7)

# Cookie carrying the session token
AUTH_COOKIE_NAME = "profile_session"


class SessionClaims(BaseModel):
    """Who the session belongs to.

    The email is what profile requests are resolved by.
    """

    user_id: UUID
    email: str
    exp: datetime


def create_session_token(
    user_id: UUID,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT for a logged-in user."""
    expire = datetime.now(timezone.utc) + (expires_delta or SESSION_TTL)
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_session_token(token: str) -> SessionClaims | None:
    """Decode and validate a session token.

    Returns:
        SessionClaims if valid, None if malformed, tampered with or expired
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None

    user_id = payload.get("sub")
    email = payload.get("email")
    if user_id is None or email is None:
        return None
    try:
        return SessionClaims(
            user_id=UUID(user_id),
            email=email,
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        return None


def create_cookie_token(user_id: UUID, email: str) -> tuple[str, int]:
    """Create a token suitable for httpOnly cookie storage.

    Returns:
        Tuple of (token, max_age_seconds)
    """
    return create_session_token(user_id, email), int(SESSION_TTL.total_seconds())
