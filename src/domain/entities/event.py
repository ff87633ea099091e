"""Event (jam) domain entity."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import StrEnum
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

MAP_LINK_PREFIXES = (
    "https://maps.google.com/",
    "https://www.google.com/maps/",
    "https://goo.gl/maps/",
    "https://maps.app.goo.gl/",
)


def is_valid_map_link(url: str) -> bool:
    """Only Google Maps share links are accepted as event locations."""
    return url.startswith(MAP_LINK_PREFIXES)


def to_utc_naive(value: datetime) -> datetime:
    """Normalise to naive UTC, the storage convention for all timestamps."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class TimeOfDay(StrEnum):
    """Buckets used by the calendar filter."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @classmethod
    def for_hour(cls, hour: int) -> "TimeOfDay":
        if hour < 12:
            return cls.MORNING
        if hour < 17:
            return cls.AFTERNOON
        return cls.EVENING


@dataclass
class Event:
    """Domain entity for a jam.

    Timestamps are naive UTC. An ``end_time`` earlier than ``start_time``
    means the jam runs past midnight into the next day.
    """

    creator_id: str
    title: str
    start_time: datetime
    end_time: datetime
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    vibe: str | None = None
    location_name: str | None = None
    location: str | None = None
    is_core: bool = False
    attendees: list[str] = field(default_factory=list)
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def effective_end_time(self) -> datetime:
        if self.end_time < self.start_time:
            return self.end_time + timedelta(days=1)
        return self.end_time

    @property
    def duration_minutes(self) -> int:
        return int((self.effective_end_time - self.start_time).total_seconds() // 60)

    def is_owned_by(self, user_id: str) -> bool:
        return self.creator_id == user_id

    def is_attending(self, user_id: str) -> bool:
        return user_id in self.attendees

    def toggle_attendee(self, user_id: str) -> bool:
        """Flip the user's membership in the attendee list.

        Returns whether the user was attending before the flip.
        """
        was_attending = self.is_attending(user_id)
        if was_attending:
            self.attendees = [a for a in self.attendees if a != user_id]
        else:
            self.attendees = [*self.attendees, user_id]
        return was_attending

    def local_start(self, tz: ZoneInfo) -> datetime:
        return self.start_time.replace(tzinfo=timezone.utc).astimezone(tz)

    def local_date(self, tz: ZoneInfo) -> date:
        return self.local_start(tz).date()

    def time_of_day(self, tz: ZoneInfo) -> TimeOfDay:
        return TimeOfDay.for_hour(self.local_start(tz).hour)


@dataclass(frozen=True, slots=True)
class EventFilters:
    """Optional listing filters, combined with AND."""

    on_date: date | None = None
    vibe: str | None = None
    time_of_day: TimeOfDay | None = None
    attending: bool = False

    def matches(self, event: Event, tz: ZoneInfo, viewer_id: str | None = None) -> bool:
        if self.on_date and event.local_date(tz) != self.on_date:
            return False
        if self.vibe and event.vibe != self.vibe:
            return False
        if self.time_of_day and event.time_of_day(tz) != self.time_of_day:
            return False
        # Without a viewer the attending filter has nothing to compare against
        if self.attending and viewer_id and not event.is_attending(viewer_id):
            return False
        return True
