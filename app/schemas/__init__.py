"""Pydantic schemas."""

from app.schemas.identity import NormalizedIdentity
from app.schemas.user import ProfileUpdate, UserBase, UserCreate, UserResponse

__all__ = [
    "NormalizedIdentity",
    "ProfileUpdate",
    "UserBase",
    "UserCreate",
    "UserResponse",
]
