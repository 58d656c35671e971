"""Resolve a normalized provider identity to a local user.

A login either finds the ProviderIdentity it used before, links a new
provider to an existing user with the same email, or creates both the user
and the identity. All writes of one attempt run inside a SAVEPOINT: if a
concurrent login inserted the same identity or email first, the savepoint
is rolled back and the lookup is repeated, so both logins converge on the
same user instead of failing.
"""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PersistenceError, UniqueConstraintRace
from app.models.provider_identity import Provider, ProviderIdentity
from app.models.user import User
from app.schemas.identity import NormalizedIdentity
from app.schemas.user import UserCreate
from app.services import user as user_service

logger = structlog.get_logger()

DEFAULT_MAX_ATTEMPTS = 3


async def get_provider_identity(
    session: AsyncSession,
    provider: Provider,
    provider_user_id: str,
) -> ProviderIdentity | None:
    """Get the identity row for a provider subject id."""
    result = await session.execute(
        select(ProviderIdentity).where(
            ProviderIdentity.provider == provider,
            ProviderIdentity.provider_user_id == provider_user_id,
        )
    )
    return result.scalar_one_or_none()


async def create_provider_identity(
    session: AsyncSession,
    provider: Provider,
    provider_user_id: str,
    user_id: UUID,
) -> ProviderIdentity:
    """Bind a provider subject id to an existing user."""
    identity = ProviderIdentity(
        provider=provider,
        provider_user_id=provider_user_id,
        user_id=user_id,
    )
    session.add(identity)
    await session.flush()
    return identity


async def _refresh_user_profile(
    session: AsyncSession,
    user_id: UUID,
    identity: NormalizedIdentity,
) -> None:
    """Copy display name and avatar from the provider when they changed."""
    user = await user_service.get_user_by_id(session, user_id)
    if user is None:
        return
    changed = False
    if identity.display_name is not None and user.display_name != identity.display_name:
        user.display_name = identity.display_name
        changed = True
    if identity.avatar_url is not None and user.avatar_url != identity.avatar_url:
        user.avatar_url = identity.avatar_url
        changed = True
    if changed:
        await session.flush()
        logger.info("User profile refreshed from provider", user_id=str(user_id))


async def _attach(session: AsyncSession, identity: NormalizedIdentity) -> tuple[UUID, str]:
    """One lookup-or-create pass. Returns (user_id, outcome)."""
    existing = await get_provider_identity(
        session, identity.provider, identity.provider_user_id
    )
    if existing is not None:
        return existing.user_id, "existing"

    user: User | None = await user_service.get_user_by_email(session, identity.email)
    outcome = "linked"
    try:
        if user is None:
            user = await user_service.create_user(
                session,
                UserCreate(
                    email=identity.email,
                    display_name=identity.display_name,
                    avatar_url=identity.avatar_url,
                ),
            )
            outcome = "created"
        await create_provider_identity(
            session, identity.provider, identity.provider_user_id, user.id
        )
    except IntegrityError as e:
        raise UniqueConstraintRace(str(e.orig)) from e
    return user.id, outcome


async def reconcile(
    session: AsyncSession,
    identity: NormalizedIdentity,
    *,
    refresh_profile: bool = False,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> UUID:
    """Get or create the local user for a normalized identity.

    The caller owns the outer transaction and commits it once the login
    has completed.

    Args:
        session: Database session
        identity: Output of the normalizer
        refresh_profile: Overwrite display name/avatar on repeat logins
        max_attempts: Lookup passes allowed when losing insert races

    Returns:
        The user's id

    Raises:
        PersistenceError: the store failed, or races kept being lost
    """
    log = logger.bind(
        provider=identity.provider.value,
        provider_user_id=identity.provider_user_id,
    )

    for attempt in range(1, max_attempts + 1):
        try:
            async with session.begin_nested():
                user_id, outcome = await _attach(session, identity)
                if outcome == "existing" and refresh_profile:
                    await _refresh_user_profile(session, user_id, identity)
        except UniqueConstraintRace:
            log.info("Concurrent login won the insert, re-reading", attempt=attempt)
            continue
        except SQLAlchemyError as e:
            log.error("Reconciliation failed", error=str(e))
            raise PersistenceError("Failed to reconcile user identity") from e

        log.info("Identity reconciled", user_id=str(user_id), outcome=outcome)
        return user_id

    log.error("Reconciliation gave up after repeated races", attempts=max_attempts)
    raise PersistenceError(
        f"Could not reconcile identity after {max_attempts} attempts"
    )
