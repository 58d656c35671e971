"""Helpers shared by the test modules."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.security import AUTH_COOKIE_NAME, create_session_token
from app.models import ProviderIdentity, User


def session_cookie(user_id: UUID, email: str) -> dict[str, str]:
    """Cookie header of a logged-in user."""
    return {"Cookie": f"{AUTH_COOKIE_NAME}={create_session_token(user_id, email)}"}


async def count_rows(session_factory: async_sessionmaker[AsyncSession]) -> tuple[int, int]:
    """(users, provider identities) currently committed."""
    async with session_factory() as session:
        users = await session.scalar(select(func.count()).select_from(User))
        identities = await session.scalar(select(func.count()).select_from(ProviderIdentity))
    return users, identities
