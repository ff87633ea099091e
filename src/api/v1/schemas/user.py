"""Pydantic schemas for User API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.user import DISPLAY_NAME_MAX_LENGTH, MAX_VIBES


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile (all fields optional).

    Points, completed tasks and identity cannot be set here.
    """

    model_config = ConfigDict(extra="forbid")

    display_name: str | None = Field(
        None,
        min_length=1,
        max_length=DISPLAY_NAME_MAX_LENGTH,
        pattern=r"^[a-z0-9_]+$",
    )
    bio: str | None = Field(None, max_length=500)
    vibes: list[str] | None = Field(None, max_length=MAX_VIBES)
    avatar_url: str | None = Field(None, max_length=500)
    timezone: str | None = Field(None, max_length=64)


class PublicUserResponse(BaseModel):
    """A profile as other users see it."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: str | None
    bio: str | None
    vibes: list[str]
    avatar_url: str | None
    num_points: int


class UserResponse(PublicUserResponse):
    """The caller's own profile, including ledger state."""

    timezone: str | None
    completed_tasks: list[str]
    is_onboarded: bool
    created_at: datetime
    updated_at: datetime


class UserDetailResponse(BaseModel):
    """Schema for the caller's profile response."""

    data: UserResponse


class PublicUserDetailResponse(BaseModel):
    """Schema for another user's profile response."""

    data: PublicUserResponse


class UserListResponse(BaseModel):
    """Schema for the directory response."""

    data: list[PublicUserResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class PointTransactionResponse(BaseModel):
    """One ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: str
    points_delta: int
    balance_after: int
    created_at: datetime


class PointsHistoryResponse(BaseModel):
    """Schema for the caller's points history."""

    data: list[PointTransactionResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
