"""Canonical identity extracted from provider claims."""

from pydantic import BaseModel, ConfigDict

from app.models.provider_identity import Provider


class NormalizedIdentity(BaseModel):
    """Provider-independent view of an authenticated subject.

    Frozen: the same claims always yield an equal, hashable value.
    """

    model_config = ConfigDict(frozen=True)

    provider: Provider
    provider_user_id: str
    email: str
    display_name: str | None = None
    avatar_url: str | None = None
