"""Authentication endpoints for OAuth login/logout."""

from typing import Any

import httpx
import structlog
from authlib.integrations.starlette_client import OAuthError
from authlib.jose.errors import JoseError
from fastapi import APIRouter, HTTPException, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.database import AsyncSessionDep
from app.core.deps import CurrentUser, CurrentUserOptional
from app.core.exceptions import (
    NormalizationError,
    PersistenceError,
    UnsupportedProviderError,
)
from app.core.oauth import GITHUB_API_BASE_URL, get_oauth_client, is_provider_configured
from app.core.observability import record_login
from app.core.rate_limit import RATE_LIMIT_AUTH, limiter
from app.core.security import AUTH_COOKIE_NAME, create_cookie_token
from app.models.provider_identity import Provider
from app.schemas.user import UserResponse
from app.services import normalizer, reconciler, user_service

settings = get_settings()
logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


def _resolve_provider(provider_name: str) -> Provider:
    try:
        return normalizer.resolve_provider(provider_name)
    except UnsupportedProviderError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


async def fetch_github_user(access_token: str) -> dict[str, Any] | None:
    """Fetch the authenticated GitHub user's profile.

    Returns None if GitHub does not answer with the profile.
    """
    async with httpx.AsyncClient(base_url=GITHUB_API_BASE_URL) as client:
        resp = await client.get(
            "user",
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/vnd.github+json",
            },
        )
    if resp.status_code != 200:
        logger.warning("GitHub user lookup failed", status_code=resp.status_code)
        return None
    return resp.json()


async def fetch_claims(provider: Provider, token: dict[str, Any]) -> dict[str, Any] | None:
    """Userinfo claims for a freshly exchanged token."""
    if provider is Provider.GOOGLE:
        userinfo = token.get("userinfo")
        return dict(userinfo) if userinfo else None
    return await fetch_github_user(token["access_token"])


def _login_response(user_id: Any, email: str) -> Response:
    """Redirect to the frontend profile page with the session cookie set."""
    token_value, max_age = create_cookie_token(user_id, email)
    response = Response(
        status_code=status.HTTP_302_FOUND,
        headers={"Location": f"{settings.frontend_url}/profile"},
    )
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token_value,
        max_age=max_age,
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
        path="/",
    )
    return response


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: CurrentUser) -> UserResponse:
    """Get the current authenticated user's information."""
    return UserResponse.model_validate(user)


@router.get("/status")
async def auth_status(user: CurrentUserOptional) -> dict:
    """Check authentication status.

    Returns user info if authenticated, otherwise returns authenticated: false.
    """
    if user:
        return {
            "authenticated": True,
            "user": UserResponse.model_validate(user).model_dump(mode="json"),
        }
    return {"authenticated": False, "user": None}


@router.post("/logout")
async def logout(response: Response) -> dict[str, str]:
    """Log out the current user by clearing the session cookie."""
    response.delete_cookie(
        key=AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
    )
    return {"message": "Logged out successfully"}


@router.get("/{provider_name}")
@limiter.limit(RATE_LIMIT_AUTH)
async def oauth_login(request: Request, provider_name: str) -> Response:
    """Start the OAuth flow by redirecting to the provider's consent page."""
    provider = _resolve_provider(provider_name)
    if not is_provider_configured(provider):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{provider.value} OAuth is not configured",
        )

    redirect_uri = request.url_for("oauth_callback", provider_name=provider.value)
    return await get_oauth_client(provider).authorize_redirect(request, redirect_uri)


@router.get("/{provider_name}/callback", name="oauth_callback")
@limiter.limit(RATE_LIMIT_AUTH)
async def oauth_callback(
    request: Request,
    provider_name: str,
    session: AsyncSessionDep,
) -> Response:
    """Complete an OAuth login.

    Exchanges the code for a token, reads the user's claims, resolves them
    to a local user and sets the session cookie.
    """
    provider = _resolve_provider(provider_name)
    log = logger.bind(provider=provider.value)

    try:
        token = await get_oauth_client(provider).authorize_access_token(request)
        claims = await fetch_claims(provider, token)
    except (OAuthError, JoseError, httpx.HTTPError) as e:
        log.error("OAuth token exchange failed", error=str(e))
        record_login(provider.value, "error")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to authenticate with {provider.value}",
        )

    if not claims:
        record_login(provider.value, "error")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to get user info from {provider.value}",
        )

    try:
        identity = normalizer.normalize(provider.value, claims)
    except NormalizationError as e:
        log.warning("OAuth claims rejected", reason=str(e))
        record_login(provider.value, "rejected")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        user_id = await reconciler.reconcile(
            session,
            identity,
            refresh_profile=settings.refresh_profile_on_login,
            max_attempts=settings.reconcile_max_attempts,
        )
        user = await user_service.get_user_by_id(session, user_id)
        await session.commit()
    except (PersistenceError, SQLAlchemyError) as e:
        log.error("Login could not be persisted", error=str(e))
        record_login(provider.value, "error")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Login is temporarily unavailable",
        )

    log.info("OAuth login successful", user_id=str(user_id))
    record_login(provider.value, "success")
    return _login_response(user_id, user.email)
