"""Profile view and edit for the logged-in user."""

import structlog
from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from app.core.database import AsyncSessionDep
from app.core.deps import CurrentSession
from app.core.exceptions import PersistenceError, UserNotFoundError
from app.core.observability import record_profile_update
from app.core.rate_limit import RATE_LIMIT_PROFILE, limiter
from app.schemas.user import ProfileUpdate, UserResponse
from app.services import user_service

logger = structlog.get_logger()

router = APIRouter(prefix="/profile", tags=["profile"])


def _not_found(e: UserNotFoundError) -> HTTPException:
    # Login created the session but no user row matches its email
    logger.warning("Profile requested for unknown user", email=e.email)
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.get("", response_model=UserResponse)
@limiter.limit(RATE_LIMIT_PROFILE)
async def read_profile(
    request: Request,
    caller: CurrentSession,
    session: AsyncSessionDep,
) -> UserResponse:
    """Get the caller's profile."""
    try:
        user = await user_service.get_profile(session, caller.email)
    except UserNotFoundError as e:
        raise _not_found(e)
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return UserResponse.model_validate(user)


@router.post("", response_model=UserResponse)
@limiter.limit(RATE_LIMIT_PROFILE)
async def update_profile(
    request: Request,
    profile: ProfileUpdate,
    caller: CurrentSession,
    session: AsyncSessionDep,
) -> UserResponse:
    """Replace the caller's display name and bio."""
    try:
        user = await user_service.update_profile(session, caller.email, profile)
        await session.commit()
    except UserNotFoundError as e:
        raise _not_found(e)
    except (PersistenceError, SQLAlchemyError) as e:
        logger.error("Profile update failed", user_id=str(caller.user_id), error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Profile could not be saved",
        )

    logger.info("Profile updated", user_id=str(user.id))
    record_profile_update()
    return UserResponse.model_validate(user)
