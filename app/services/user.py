"""User service for database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PersistenceError, UserNotFoundError
from app.models.user import User, utcnow
from app.schemas.user import ProfileUpdate, UserCreate


async def get_user_by_id(session: AsyncSession, user_id: UUID) -> User | None:
    """Get a user by their ID."""
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Get a user by their email address."""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, user_data: UserCreate) -> User:
    """Create a new user.

    The row is flushed so its id can be referenced, but not committed.
    """
    user = User(
        email=user_data.email,
        display_name=user_data.display_name,
        avatar_url=user_data.avatar_url,
    )
    session.add(user)
    await session.flush()
    return user


async def get_profile(session: AsyncSession, email: str) -> User:
    """Get the profile of the user logged in with this email."""
    try:
        user = await get_user_by_email(session, email)
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to load user {email}") from e
    if user is None:
        raise UserNotFoundError(email)
    return user


async def update_profile(
    session: AsyncSession,
    email: str,
    profile: ProfileUpdate,
) -> User:
    """Apply a profile edit and stamp the update time.

    Both fields are written even when empty or None.
    """
    user = await get_profile(session, email)

    user.display_name = profile.display_name
    user.bio = profile.bio
    user.updated_at = utcnow()
    try:
        await session.flush()
        await session.refresh(user)
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to update user {email}") from e

    return user
