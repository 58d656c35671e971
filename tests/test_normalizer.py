"""Tests for mapping provider claims to NormalizedIdentity."""

import pytest
from pydantic import ValidationError

from app.core.exceptions import (
    MissingEmailError,
    MissingIdentityError,
    MissingLoginError,
    NormalizationError,
    UnsupportedProviderError,
)
from app.models import Provider
from app.services.normalizer import normalize, resolve_provider

GOOGLE_CLAIMS = {
    "sub": "109876543210",
    "email": "ann@example.com",
    "email_verified": True,
    "name": "Ann Example",
    "picture": "https://lh3.googleusercontent.com/a/ann",
}

GITHUB_CLAIMS = {
    "id": 583231,
    "login": "octocat",
    "email": "octocat@github.com",
    "name": "The Octocat",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231",
}


class TestResolveProvider:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("google", Provider.GOOGLE),
            ("GOOGLE", Provider.GOOGLE),
            ("github", Provider.GITHUB),
            (" GitHub ", Provider.GITHUB),
        ],
    )
    def test_known_names(self, name, expected):
        assert resolve_provider(name) is expected

    @pytest.mark.parametrize("name", ["facebook", "", "google-oidc"])
    def test_unknown_names(self, name):
        with pytest.raises(UnsupportedProviderError):
            resolve_provider(name)


class TestGoogle:
    def test_extracts_fields(self):
        identity = normalize("google", GOOGLE_CLAIMS)

        assert identity.provider is Provider.GOOGLE
        assert identity.provider_user_id == "109876543210"
        assert identity.email == "ann@example.com"
        assert identity.display_name == "Ann Example"
        assert identity.avatar_url == "https://lh3.googleusercontent.com/a/ann"

    def test_optional_fields_may_be_missing(self):
        identity = normalize("google", {"sub": "123", "email": "a@x.com", "name": "Ann"})

        assert identity.display_name == "Ann"
        assert identity.avatar_url is None

    def test_missing_email_fails(self):
        claims = {k: v for k, v in GOOGLE_CLAIMS.items() if k != "email"}
        with pytest.raises(MissingEmailError):
            normalize("google", claims)

    def test_empty_email_fails(self):
        with pytest.raises(MissingEmailError):
            normalize("google", {**GOOGLE_CLAIMS, "email": ""})

    def test_login_claim_is_not_used_for_google(self):
        with pytest.raises(MissingEmailError):
            normalize("google", {"sub": "123", "login": "ann"})

    def test_missing_subject_fails(self):
        claims = {k: v for k, v in GOOGLE_CLAIMS.items() if k != "sub"}
        with pytest.raises(MissingIdentityError):
            normalize("google", claims)


class TestGithub:
    def test_extracts_fields(self):
        identity = normalize("github", GITHUB_CLAIMS)

        assert identity.provider is Provider.GITHUB
        assert identity.provider_user_id == "583231"
        assert identity.email == "octocat@github.com"
        assert identity.display_name == "The Octocat"
        assert identity.avatar_url == "https://avatars.githubusercontent.com/u/583231"

    def test_numeric_id_is_stringified(self):
        identity = normalize("github", {"id": 123, "login": "annx"})
        assert identity.provider_user_id == "123"

    def test_missing_email_uses_noreply_address(self):
        identity = normalize("github", {"id": 1, "login": "octocat", "email": None})
        assert identity.email == "octocat@users.noreply.github.com"

    def test_missing_email_and_login_fails(self):
        with pytest.raises(MissingLoginError):
            normalize("github", {"id": 1, "name": "No Login"})

    def test_missing_id_fails(self):
        claims = {k: v for k, v in GITHUB_CLAIMS.items() if k != "id"}
        with pytest.raises(MissingIdentityError):
            normalize("github", claims)

    def test_google_subject_claim_is_not_used_for_github(self):
        with pytest.raises(MissingIdentityError):
            normalize("github", {"sub": "1", "login": "octocat"})

    def test_null_name_and_avatar(self):
        identity = normalize(
            "github", {"id": 7, "login": "ghost", "name": None, "avatar_url": None}
        )
        assert identity.display_name is None
        assert identity.avatar_url is None


def test_unsupported_provider():
    with pytest.raises(UnsupportedProviderError) as excinfo:
        normalize("facebook", {"id": "1", "email": "a@x.com"})
    assert excinfo.value.provider_name == "facebook"


@pytest.mark.parametrize(
    "provider,claims",
    [("google", GOOGLE_CLAIMS), ("github", GITHUB_CLAIMS), ("github", {"id": 9, "login": "x"})],
)
def test_normalize_is_pure(provider, claims):
    snapshot = dict(claims)

    first = normalize(provider, claims)
    second = normalize(provider, claims)

    assert first == second
    assert hash(first) == hash(second)
    assert claims == snapshot


def test_identity_is_immutable():
    identity = normalize("google", GOOGLE_CLAIMS)
    with pytest.raises(ValidationError):
        identity.email = "other@example.com"


def test_normalization_errors_are_value_errors():
    # Callers that only know about ValueError still reject the login
    assert issubclass(NormalizationError, ValueError)
    for error in (UnsupportedProviderError, MissingIdentityError, MissingEmailError, MissingLoginError):
        assert issubclass(error, NormalizationError)
