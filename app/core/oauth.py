"""OAuth client configuration for GitHub and Google."""

from authlib.integrations.starlette_client import OAuth, StarletteOAuth2App

from app.core.config import get_settings
from app.models.provider_identity import Provider

settings = get_settings()

GITHUB_API_BASE_URL = "https://api.github.com/"

oauth = OAuth()

# GitHub is plain OAuth2: the profile comes from the REST API after login.
# Private emails fall back to the noreply address, so user:email is not needed.
oauth.register(
    name=Provider.GITHUB.value,
    client_id=settings.github_client_id,
    client_secret=settings.github_client_secret,
    access_token_url="https://github.com/login/oauth/access_token",
    authorize_url="https://github.com/login/oauth/authorize",
    api_base_url=GITHUB_API_BASE_URL,
    client_kwargs={"scope": "read:user"},
)

# Google is OIDC: claims arrive as "userinfo" in the token response
oauth.register(
    name=Provider.GOOGLE.value,
    client_id=settings.google_client_id,
    client_secret=settings.google_client_secret,
    server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
    client_kwargs={"scope": "openid email profile"},
)


def get_oauth_client(provider: Provider) -> StarletteOAuth2App:
    """Get the registered OAuth client for a provider."""
    return oauth.create_client(provider.value)


def is_provider_configured(provider: Provider) -> bool:
    """Whether client credentials were supplied for the provider."""
    if provider is Provider.GITHUB:
        return bool(settings.github_client_id)
    return bool(settings.google_client_id)
