"""Pydantic schemas for Task API."""

from typing import Any

from pydantic import BaseModel, Field

from api.v1.schemas.event import PointsChange


class TaskResponse(BaseModel):
    """A catalog task with the caller's progress."""

    id: str
    title: str
    description: str
    points: int
    repeatable: bool
    require_proof: bool
    completed: bool
    completion_count: int


class TaskListResponse(BaseModel):
    """Schema for the task catalog response."""

    data: list[TaskResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class VerificationData(BaseModel):
    """Outcome of a proof submission."""

    task_id: str
    is_valid: bool
    proof_url: str
    points: PointsChange | None = None


class VerificationResponse(BaseModel):
    """Schema for the verify task response."""

    data: VerificationData
