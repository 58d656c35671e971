"""Domain errors raised while turning provider claims into local users."""


class IdentityError(Exception):
    """Base class for login and profile errors."""


class NormalizationError(IdentityError, ValueError):
    """Provider response is unsupported or malformed. Not retryable."""


class UnsupportedProviderError(NormalizationError):
    """Raised when the provider name is not one we can log in with."""

    def __init__(self, provider_name: str) -> None:
        super().__init__(f"Unsupported OAuth provider: {provider_name}")
        self.provider_name = provider_name


class MissingIdentityError(NormalizationError):
    """Raised when the claims carry no provider subject id."""


class MissingEmailError(NormalizationError):
    """Raised when the provider returned no email and none can be derived."""


class MissingLoginError(NormalizationError):
    """Raised when a GitHub response has neither an email nor a login."""


class PersistenceError(IdentityError):
    """Store-level failure. The caller may retry the whole login."""


class UniqueConstraintRace(IdentityError):
    """A concurrent login inserted the same user or identity first.

    Only used inside the reconciler, which re-reads instead of failing.
    """


class UserNotFoundError(IdentityError):
    """Raised when no user record matches the authenticated email."""

    def __init__(self, email: str) -> None:
        super().__init__(f"No user registered with email {email}")
        self.email = email
