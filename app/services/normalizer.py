"""Map provider-specific OAuth claims onto a NormalizedIdentity."""

from collections.abc import Mapping
from typing import Any, NamedTuple

from app.core.exceptions import (
    MissingEmailError,
    MissingIdentityError,
    MissingLoginError,
    UnsupportedProviderError,
)
from app.models.provider_identity import Provider
from app.schemas.identity import NormalizedIdentity

GITHUB_NOREPLY_DOMAIN = "users.noreply.github.com"


class ClaimFields(NamedTuple):
    """Claim keys holding each canonical field for one provider."""

    subject: str
    email: str
    display_name: str
    avatar: str


CLAIM_FIELDS: dict[Provider, ClaimFields] = {
    Provider.GOOGLE: ClaimFields(
        subject="sub", email="email", display_name="name", avatar="picture"
    ),
    Provider.GITHUB: ClaimFields(
        subject="id", email="email", display_name="name", avatar="avatar_url"
    ),
}


def resolve_provider(provider_name: str) -> Provider:
    """Resolve a registration name such as "google" or "GITHUB"."""
    try:
        return Provider[provider_name.strip().upper()]
    except (AttributeError, KeyError):
        raise UnsupportedProviderError(str(provider_name)) from None


def _claim(claims: Mapping[str, Any], key: str) -> str | None:
    """Read a claim as a string; None and "" count as absent."""
    value = claims.get(key)
    if value is None:
        return None
    value = str(value)
    return value or None


def github_noreply_email(login: str) -> str:
    """Address GitHub uses for accounts that keep their email private."""
    return f"{login}@{GITHUB_NOREPLY_DOMAIN}"


def normalize(provider_name: str, claims: Mapping[str, Any]) -> NormalizedIdentity:
    """Extract the canonical identity from a provider's userinfo claims.

    Args:
        provider_name: OAuth client registration name ("google", "github")
        claims: userinfo / OIDC claims returned by the provider

    Returns:
        NormalizedIdentity with display name and avatar possibly None

    Raises:
        UnsupportedProviderError: provider is not Google or GitHub
        MissingIdentityError: no subject id in the claims
        MissingEmailError: Google response without an email
        MissingLoginError: GitHub response without email or login
    """
    provider = resolve_provider(provider_name)
    fields = CLAIM_FIELDS[provider]

    provider_user_id = _claim(claims, fields.subject)
    if provider_user_id is None:
        raise MissingIdentityError(
            f"{provider.value} response has no '{fields.subject}' claim"
        )

    email = _claim(claims, fields.email)
    if email is None:
        if provider is not Provider.GITHUB:
            raise MissingEmailError(f"{provider.value} response has no email")
        login = _claim(claims, "login")
        if login is None:
            raise MissingLoginError("github response has neither email nor login")
        email = github_noreply_email(login)

    return NormalizedIdentity(
        provider=provider,
        provider_user_id=provider_user_id,
        email=email,
        display_name=_claim(claims, fields.display_name),
        avatar_url=_claim(claims, fields.avatar),
    )
