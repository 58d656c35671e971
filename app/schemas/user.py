"""User Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserBase(BaseModel):
    """Base schema for user data."""

    email: str
    display_name: str | None = None
    avatar_url: str | None = None


class UserCreate(UserBase):
    """Schema for creating a user from a normalized identity."""


class ProfileUpdate(BaseModel):
    """Profile edit submitted by the user.

    Both fields are applied as given: an empty string clears the value and
    an omitted field is stored as null.
    """

    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(default=None, alias="displayName", max_length=255)
    bio: str | None = Field(default=None, max_length=5000)


class UserResponse(UserBase):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    bio: str | None = None
    created_at: datetime
    updated_at: datetime
