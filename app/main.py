"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.sessions import SessionMiddleware

from app.api.profile import router as profile_router
from app.api.v1.router import router as v1_router
from app.core.config import get_settings
from app.core.database import close_db
from app.core.middleware import SecurityHeadersMiddleware
from app.core.observability import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    setup_observability,
)
from app.core.rate_limit import limiter

settings = get_settings()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting OAuth Profile API", version=settings.app_version)
    yield
    logger.info("Shutting down OAuth Profile API")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="OAuth login with Google and GitHub and user profiles",
    lifespan=lifespan,
)

setup_observability(app)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Middleware stack: the last one added is the outermost

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    SecurityHeadersMiddleware,
    enable_hsts=not settings.debug,
)

# Session middleware (required for OAuth state storage)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    session_cookie="oauth_state",
    max_age=3600,  # 1 hour for OAuth flow
    same_site="lax",
    https_only=not settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

app.include_router(v1_router)
app.include_router(profile_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Welcome to OAuth Profile API", "version": settings.app_version}
