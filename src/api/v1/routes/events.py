"""Event (jam) API routes."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from api.dependencies.auth import CurrentUser, OptionalUser
from api.v1.dependencies import Account, get_event_service
from api.v1.schemas.event import (
    AttendanceData,
    AttendanceResponse,
    CalendarResponse,
    EventCreate,
    EventDetailResponse,
    EventListResponse,
    EventResponse,
    EventUpdate,
    PointsChange,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.event import EventFilters, TimeOfDay
from domain.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["events"])


def event_filters(
    on_date: date | None = Query(None, alias="date", description="Local calendar day"),
    vibe: str | None = Query(None, description="Exact vibe emoji"),
    time_of_day: TimeOfDay | None = Query(None, description="morning, afternoon or evening"),
    attending: bool = Query(False, description="Only events the caller attends"),
) -> EventFilters:
    """Listing filters from the query string."""
    return EventFilters(
        on_date=on_date, vibe=vibe, time_of_day=time_of_day, attending=attending
    )


@router.get(
    "",
    response_model=EventListResponse,
    summary="List events",
    responses={200: {"description": "Events in start-time order"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_events(
    request: Request,
    user: OptionalUser,
    filters: EventFilters = Depends(event_filters),
    service: EventService = Depends(get_event_service),
) -> EventListResponse:
    """
    List calendar events. No authentication required.

    Filters combine with AND. `attending=true` only applies when the caller
    is authenticated.
    """
    events = await service.list_events(filters, viewer_id=user.id if user else None)
    return EventListResponse(
        data=[EventResponse.model_validate(e) for e in events],
        meta={"total": len(events)},
    )


@router.get(
    "/calendar",
    response_model=CalendarResponse,
    summary="Events grouped by day",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_calendar(
    request: Request,
    user: OptionalUser,
    filters: EventFilters = Depends(event_filters),
    service: EventService = Depends(get_event_service),
) -> CalendarResponse:
    """Same as the listing, grouped by local calendar day."""
    events = await service.list_events(filters, viewer_id=user.id if user else None)
    grouped = service.group_by_day(events)
    return CalendarResponse(
        data={
            day: [EventResponse.model_validate(e) for e in day_events]
            for day, day_events in grouped.items()
        },
        meta={"total": len(events), "days": len(grouped)},
    )


@router.post(
    "",
    response_model=EventDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
    responses={
        201: {"description": "Event created, CREATE_JAM awarded"},
        400: {"description": "Invalid title or map link"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_event(
    request: Request,
    body: EventCreate,
    account: Account,
    service: EventService = Depends(get_event_service),
) -> EventDetailResponse:
    """
    Create an event owned by the caller.

    The caller is added as the first attendee and earns the CREATE_JAM points.
    """
    event = await service.create(
        creator_id=account.id,
        title=body.title,
        description=body.description,
        vibe=body.vibe,
        location_name=body.location_name,
        location=body.location,
        start_time=body.start_time,
        end_time=body.end_time,
        is_core=body.is_core,
    )
    return EventDetailResponse(data=EventResponse.model_validate(event))


@router.get(
    "/{event_id}",
    response_model=EventDetailResponse,
    summary="Get an event",
    responses={404: {"description": "Event not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_event(
    request: Request,
    event_id: UUID,
    user: CurrentUser,
    service: EventService = Depends(get_event_service),
) -> EventDetailResponse:
    """Get one of the caller's own events."""
    event = await service.get_by_id(event_id, user.id)
    return EventDetailResponse(data=EventResponse.model_validate(event))


@router.patch(
    "/{event_id}",
    response_model=EventDetailResponse,
    summary="Update an event",
    responses={
        403: {"description": "Caller is not the creator"},
        404: {"description": "Event not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_event(
    request: Request,
    event_id: UUID,
    body: EventUpdate,
    user: CurrentUser,
    service: EventService = Depends(get_event_service),
) -> EventDetailResponse:
    """Update an event. All fields are optional (partial update)."""
    event = await service.update(
        event_id=event_id,
        requester_id=user.id,
        **body.model_dump(exclude_unset=True),
    )
    return EventDetailResponse(data=EventResponse.model_validate(event))


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an event",
    responses={
        204: {"description": "Event deleted"},
        403: {"description": "Caller is not the creator"},
        404: {"description": "Event not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_event(
    request: Request,
    event_id: UUID,
    user: CurrentUser,
    service: EventService = Depends(get_event_service),
) -> Response:
    """Delete an event."""
    await service.delete(event_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{event_id}/attend",
    response_model=AttendanceResponse,
    summary="Toggle attendance",
    responses={
        200: {"description": "Attendance flipped and ATTEND_JAM points applied"},
        404: {"description": "Event not found"},
        409: {"description": "Concurrent update, retry"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def toggle_attendance(
    request: Request,
    event_id: UUID,
    account: Account,
    service: EventService = Depends(get_event_service),
) -> AttendanceResponse:
    """
    Join the event if the caller is not attending, leave it otherwise.

    Joining awards ATTEND_JAM; leaving deducts it (never below zero).
    """
    result = await service.toggle_attendance(event_id, account.id)
    points = (
        PointsChange(points_delta=result.points.points_delta, new_total=result.points.new_total)
        if result.points
        else None
    )
    return AttendanceResponse(
        data=AttendanceData(event_id=event_id, attending=result.attending, points=points)
    )
