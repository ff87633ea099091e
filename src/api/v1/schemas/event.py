"""Pydantic schemas for Event API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.entities.event import Event


class EventBase(BaseModel):
    """Base schema for Event."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    vibe: str = Field(..., min_length=1, max_length=32)
    location_name: str | None = Field(None, max_length=255)
    location: str | None = Field(None, max_length=500, description="Google Maps link")
    start_time: datetime
    end_time: datetime


class EventCreate(EventBase):
    """Schema for creating an Event."""

    is_core: bool = False


class EventUpdate(BaseModel):
    """Schema for updating an Event (all fields optional).

    ``creator_id`` and ``attendees`` are not patchable. An explicit null
    clears ``description``, ``location_name`` or ``location``.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    vibe: str | None = Field(None, min_length=1, max_length=32)
    location_name: str | None = Field(None, max_length=255)
    location: str | None = Field(None, max_length=500)
    start_time: datetime | None = None
    end_time: datetime | None = None
    is_core: bool | None = None

    @model_validator(mode="after")
    def _required_fields_not_null(self) -> "EventUpdate":
        for name in ("title", "vibe", "start_time", "end_time", "is_core"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class EventResponse(BaseModel):
    """Schema for Event response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "creator_id": "did:privy:cm4abc123",
                "title": "Sunset jam at the point",
                "description": "Bring a towel",
                "vibe": "🏖️",
                "location_name": "Weligama beach",
                "location": "https://maps.app.goo.gl/abc123",
                "start_time": "2024-12-30T12:30:00",
                "end_time": "2024-12-30T15:00:00",
                "duration_minutes": 150,
                "is_core": False,
                "attendees": ["did:privy:cm4abc123"],
                "attendee_count": 1,
                "created_at": "2024-12-28T10:00:00",
                "updated_at": "2024-12-28T10:00:00",
            }
        },
    )

    id: UUID
    creator_id: str
    title: str
    description: str | None
    vibe: str | None
    location_name: str | None
    location: str | None
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    is_core: bool
    attendees: list[str]
    attendee_count: int
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _from_entity(cls, value: Any) -> Any:
        if isinstance(value, Event):
            return {
                "id": value.id,
                "creator_id": value.creator_id,
                "title": value.title,
                "description": value.description,
                "vibe": value.vibe,
                "location_name": value.location_name,
                "location": value.location,
                "start_time": value.start_time,
                "end_time": value.end_time,
                "duration_minutes": value.duration_minutes,
                "is_core": value.is_core,
                "attendees": list(value.attendees),
                "attendee_count": len(value.attendees),
                "created_at": value.created_at,
                "updated_at": value.updated_at,
            }
        return value


class EventListResponse(BaseModel):
    """Schema for list of Events response."""

    data: list[EventResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class EventDetailResponse(BaseModel):
    """Schema for single Event response."""

    data: EventResponse


class CalendarResponse(BaseModel):
    """Events grouped by local day, keyed YYYY-MM-DD."""

    data: dict[str, list[EventResponse]]
    meta: dict[str, Any] = Field(default_factory=dict)


class PointsChange(BaseModel):
    """Points movement caused by an action."""

    points_delta: int
    new_total: int


class AttendanceData(BaseModel):
    """Attendance state after a toggle."""

    event_id: UUID
    attending: bool
    points: PointsChange | None = None


class AttendanceResponse(BaseModel):
    """Schema for attendance toggle response."""

    data: AttendanceData


class UserEventsData(BaseModel):
    """Events a user hosts and attends."""

    hosting: list[EventResponse]
    attending: list[EventResponse]


class UserEventsResponse(BaseModel):
    """Schema for a user's events response."""

    data: UserEventsData
