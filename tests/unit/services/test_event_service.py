"""Unit tests for Event service layer."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from core.exceptions import (
    AuthorizationError,
    ConcurrentUpdateError,
    DomainValidationError,
    EventNotFoundError,
    UserNotFoundError,
)
from domain.entities.event import Event, EventFilters
from domain.entities.task import TaskIds
from domain.entities.user import User
from domain.services.event_service import EventService
from domain.services.points_service import PointsService
from tests.unit.conftest import FakeUnitOfWork

CALENDAR_START = datetime(2024, 12, 28, 18, 30)


@pytest.fixture
def service(uow: FakeUnitOfWork) -> EventService:
    return EventService(
        lambda: uow,
        points_service=PointsService(lambda: uow),
        timezone="Asia/Colombo",
        calendar_start=CALENDAR_START,
    )


@pytest.fixture
def event(user_id: str) -> Event:
    return Event(
        creator_id=user_id,
        title="Sunset jam",
        start_time=datetime(2024, 12, 30, 12, 30),
        end_time=datetime(2024, 12, 30, 15, 0),
        vibe="🏖️",
        attendees=[user_id],
    )


def _echo_create(uow: FakeUnitOfWork) -> None:
    uow.events.create.side_effect = lambda e: e
    uow.events.update.side_effect = lambda e: e


class TestCreate:
    @pytest.mark.asyncio
    async def test_creator_attends_and_earns_points(
        self, service: EventService, uow: FakeUnitOfWork, user: User
    ) -> None:
        uow.users.get.return_value = user
        _echo_create(uow)

        created = await service.create(
            creator_id=user.id,
            title="Jam",
            start_time=datetime(2024, 12, 30, 18, 0, tzinfo=timezone(timedelta(hours=5, minutes=30))),
            end_time=datetime(2024, 12, 30, 20, 0, tzinfo=timezone(timedelta(hours=5, minutes=30))),
            vibe="🎉",
        )

        assert created.creator_id == user.id
        assert created.attendees == [user.id]
        assert created.start_time == datetime(2024, 12, 30, 12, 30)
        assert user.num_points == 10
        assert user.completed_tasks == [TaskIds.CREATE_JAM]
        assert uow.committed

    @pytest.mark.asyncio
    async def test_awards_on_every_creation(
        self, service: EventService, uow: FakeUnitOfWork, user: User
    ) -> None:
        uow.users.get.return_value = user
        _echo_create(uow)

        for _ in range(3):
            await service.create(
                creator_id=user.id,
                title="Jam",
                start_time=datetime(2024, 12, 30, 10),
                end_time=datetime(2024, 12, 30, 12),
            )

        assert user.num_points == 30
        assert user.completion_count(TaskIds.CREATE_JAM) == 3

    @pytest.mark.asyncio
    async def test_rejects_blank_title_before_any_write(
        self, service: EventService, uow: FakeUnitOfWork
    ) -> None:
        with pytest.raises(DomainValidationError):
            await service.create(
                creator_id="u",
                title="   ",
                start_time=datetime(2024, 12, 30, 10),
                end_time=datetime(2024, 12, 30, 12),
            )

        uow.events.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_non_maps_link(
        self, service: EventService, uow: FakeUnitOfWork
    ) -> None:
        with pytest.raises(DomainValidationError) as exc_info:
            await service.create(
                creator_id="u",
                title="Jam",
                start_time=datetime(2024, 12, 30, 10),
                end_time=datetime(2024, 12, 30, 12),
                location="https://example.com/place",
            )

        assert exc_info.value.details == {"field": "location"}
        uow.events.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_creator_raises(
        self, service: EventService, uow: FakeUnitOfWork
    ) -> None:
        uow.users.get.return_value = None

        with pytest.raises(UserNotFoundError):
            await service.create(
                creator_id="ghost",
                title="Jam",
                start_time=datetime(2024, 12, 30, 10),
                end_time=datetime(2024, 12, 30, 12),
            )

        uow.events.create.assert_not_called()


class TestToggleAttendance:
    @pytest.mark.asyncio
    async def test_join_then_leave_restores_state(
        self, service: EventService, uow: FakeUnitOfWork, event: Event, other_id: str
    ) -> None:
        guest = User(id=other_id, display_name="bob")
        uow.events.get.return_value = event
        uow.users.get.return_value = guest
        _echo_create(uow)

        joined = await service.toggle_attendance(event.id, other_id)

        assert joined.attending is True
        assert other_id in event.attendees
        assert guest.num_points == 10
        assert guest.completed_tasks[-1] == TaskIds.ATTEND_JAM

        left = await service.toggle_attendance(event.id, other_id)

        assert left.attending is False
        assert other_id not in event.attendees
        assert guest.num_points == 0
        assert guest.completed_tasks == []
        assert left.points is not None and left.points.points_delta == -10

    @pytest.mark.asyncio
    async def test_attendance_written_before_ledger(
        self, service: EventService, uow: FakeUnitOfWork, event: Event, other_id: str
    ) -> None:
        calls: list[str] = []
        uow.events.get.return_value = event
        uow.users.get.return_value = User(id=other_id)
        uow.events.update.side_effect = lambda e: calls.append("attendance") or e
        uow.users.update_ledger.side_effect = lambda u: calls.append("ledger") or u

        await service.toggle_attendance(event.id, other_id)

        assert calls == ["attendance", "ledger"]

    @pytest.mark.asyncio
    async def test_concurrent_ledger_write_is_not_committed(
        self, service: EventService, uow: FakeUnitOfWork, event: Event, other_id: str
    ) -> None:
        uow.events.get.return_value = event
        uow.users.get.return_value = User(id=other_id)
        uow.users.update_ledger.side_effect = ConcurrentUpdateError("user", other_id)

        with pytest.raises(ConcurrentUpdateError):
            await service.toggle_attendance(event.id, other_id)

        assert not uow.committed

    @pytest.mark.asyncio
    async def test_missing_event_raises(
        self, service: EventService, uow: FakeUnitOfWork
    ) -> None:
        uow.events.get.return_value = None

        with pytest.raises(EventNotFoundError):
            await service.toggle_attendance(uuid4(), "u")


class TestOwnership:
    @pytest.mark.asyncio
    async def test_get_by_id_hides_other_users_events(
        self, service: EventService, uow: FakeUnitOfWork, event: Event, other_id: str
    ) -> None:
        uow.events.get.return_value = event

        with pytest.raises(EventNotFoundError):
            await service.get_by_id(event.id, other_id)

    @pytest.mark.asyncio
    async def test_get_by_id_returns_own_event(
        self, service: EventService, uow: FakeUnitOfWork, event: Event, user_id: str
    ) -> None:
        uow.events.get.return_value = event

        assert (await service.get_by_id(event.id, user_id)).id == event.id

    @pytest.mark.asyncio
    async def test_update_by_non_owner_is_forbidden(
        self, service: EventService, uow: FakeUnitOfWork, event: Event, other_id: str
    ) -> None:
        uow.events.get.return_value = event

        with pytest.raises(AuthorizationError):
            await service.update(event.id, other_id, title="Mine now")

        uow.events.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_applies_only_given_fields(
        self, service: EventService, uow: FakeUnitOfWork, event: Event, user_id: str
    ) -> None:
        uow.events.get.return_value = event
        _echo_create(uow)

        updated = await service.update(event.id, user_id, title="Moonrise jam")

        assert updated.title == "Moonrise jam"
        assert updated.vibe == "🏖️"
        assert updated.attendees == [user_id]
        assert uow.committed

    @pytest.mark.asyncio
    async def test_explicit_none_clears_optional_fields(
        self, service: EventService, uow: FakeUnitOfWork, event: Event, user_id: str
    ) -> None:
        event.description = "Bring a towel"
        event.location_name = "Weligama beach"
        event.location = "https://maps.app.goo.gl/abc123"
        uow.events.get.return_value = event
        _echo_create(uow)

        updated = await service.update(event.id, user_id, description=None, location=None)

        assert updated.description is None
        assert updated.location is None
        assert updated.location_name == "Weligama beach"

    @pytest.mark.asyncio
    async def test_delete_by_non_owner_is_forbidden(
        self, service: EventService, uow: FakeUnitOfWork, event: Event, other_id: str
    ) -> None:
        uow.events.get.return_value = event

        with pytest.raises(AuthorizationError):
            await service.delete(event.id, other_id)

        uow.events.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_missing_event_raises(
        self, service: EventService, uow: FakeUnitOfWork
    ) -> None:
        uow.events.get.return_value = None

        with pytest.raises(EventNotFoundError):
            await service.delete(uuid4(), "u")


class TestListing:
    @pytest.mark.asyncio
    async def test_reads_from_calendar_start(
        self, service: EventService, uow: FakeUnitOfWork, event: Event
    ) -> None:
        uow.events.list_starting_from.return_value = [event]

        result = await service.list_events()

        assert result == [event]
        uow.events.list_starting_from.assert_awaited_once_with(CALENDAR_START)

    @pytest.mark.asyncio
    async def test_applies_filters(
        self, service: EventService, uow: FakeUnitOfWork, event: Event
    ) -> None:
        uow.events.list_starting_from.return_value = [event]

        assert await service.list_events(EventFilters(vibe="🎉")) == []
        assert await service.list_events(EventFilters(vibe="🏖️")) == [event]

    def test_group_by_day_uses_local_dates(self, service: EventService, user_id: str) -> None:
        late = Event(
            creator_id=user_id,
            title="Late",
            start_time=datetime(2024, 12, 30, 19, 0),  # 00:30 on the 31st locally
            end_time=datetime(2024, 12, 30, 21, 0),
        )
        early = Event(
            creator_id=user_id,
            title="Early",
            start_time=datetime(2024, 12, 30, 3, 0),
            end_time=datetime(2024, 12, 30, 4, 0),
        )

        grouped = service.group_by_day([early, late])

        assert list(grouped) == ["2024-12-30", "2024-12-31"]
        assert grouped["2024-12-31"] == [late]

    @pytest.mark.asyncio
    async def test_list_for_user(
        self, service: EventService, uow: FakeUnitOfWork, user: User, event: Event
    ) -> None:
        uow.users.get.return_value = user
        uow.events.list_by_creator.return_value = [event]
        uow.events.list_attended_by.return_value = []

        result = await service.list_for_user(user.id)

        assert result.hosting == [event]
        assert result.attending == []
