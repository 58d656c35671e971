"""Dependency injection utilities for FastAPI routes."""

from typing import Annotated

from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.core.security import SessionClaims, decode_session_token
from app.models.user import User
from app.services import user_service


async def get_token_from_cookie(
    profile_session: Annotated[str | None, Cookie()] = None,
) -> str | None:
    """Extract session token from httpOnly cookie."""
    return profile_session


async def get_session_claims_optional(
    token: Annotated[str | None, Depends(get_token_from_cookie)],
) -> SessionClaims | None:
    """Decoded session if a valid cookie was sent, otherwise None."""
    if token is None:
        return None
    return decode_session_token(token)


async def get_session_claims(
    claims: Annotated[SessionClaims | None, Depends(get_session_claims_optional)],
) -> SessionClaims:
    """Decoded session of an authenticated caller.

    Raises HTTPException 401 if the cookie is missing, invalid or expired.
    """
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


async def get_current_user_optional(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    claims: Annotated[SessionClaims | None, Depends(get_session_claims_optional)],
) -> User | None:
    """Get current user if logged in, otherwise return None.

    Use this for routes that work with or without authentication.
    """
    if claims is None:
        return None
    return await user_service.get_user_by_id(session, claims.user_id)


async def get_current_user(
    claims: Annotated[SessionClaims, Depends(get_session_claims)],
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    """Get current authenticated user.

    Raises HTTPException 401 if not authenticated or the user is gone.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


# Type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentUserOptional = Annotated[User | None, Depends(get_current_user_optional)]
CurrentSession = Annotated[SessionClaims, Depends(get_session_claims)]
