"""User profile API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import Account, get_event_service, get_points_service, get_user_service
from api.v1.schemas.event import EventResponse, UserEventsData, UserEventsResponse
from api.v1.schemas.user import (
    PointsHistoryResponse,
    PointTransactionResponse,
    ProfileUpdate,
    PublicUserDetailResponse,
    PublicUserResponse,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.event_service import EventService
from domain.services.points_service import PointsService
from domain.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserDetailResponse, summary="Get my profile")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_me(request: Request, account: Account) -> UserDetailResponse:
    """Get the caller's profile, creating an empty one on first sign-in."""
    return UserDetailResponse(data=UserResponse.model_validate(account))


@router.patch(
    "/me",
    response_model=UserDetailResponse,
    summary="Update my profile",
    responses={
        400: {"description": "Invalid vibes"},
        409: {"description": "Display name already taken"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_me(
    request: Request,
    body: ProfileUpdate,
    account: Account,
    service: UserService = Depends(get_user_service),
) -> UserDetailResponse:
    """
    Update the caller's profile. All fields are optional (partial update).

    Setting a display name for the first time completes onboarding and
    awards the SIGN_UP points.
    """
    user = await service.update_profile(account.id, **body.model_dump(exclude_unset=True))
    return UserDetailResponse(data=UserResponse.model_validate(user))


@router.get("/me/points", response_model=PointsHistoryResponse, summary="My points history")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_my_points(
    request: Request,
    account: Account,
    service: PointsService = Depends(get_points_service),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> PointsHistoryResponse:
    """Ledger entries for the caller, newest first."""
    history = await service.get_history(account.id, limit=limit, offset=offset)
    return PointsHistoryResponse(
        data=[PointTransactionResponse.model_validate(t) for t in history],
        meta={"total_points": account.num_points, "count": len(history)},
    )


@router.get("", response_model=UserListResponse, summary="User directory")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_users(
    request: Request,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> UserListResponse:
    """Onboarded users ordered by points, highest first."""
    users = await service.list_directory(limit=limit, offset=offset)
    return UserListResponse(
        data=[PublicUserResponse.model_validate(u) for u in users],
        meta={"count": len(users), "limit": limit, "offset": offset},
    )


@router.get(
    "/{user_id}",
    response_model=PublicUserDetailResponse,
    summary="Get a profile",
    responses={404: {"description": "User not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_user(
    request: Request,
    user_id: str,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> PublicUserDetailResponse:
    """Get another user's public profile."""
    profile = await service.get_public_profile(user_id)
    return PublicUserDetailResponse(data=PublicUserResponse.model_validate(profile))


@router.get(
    "/{user_id}/events",
    response_model=UserEventsResponse,
    summary="A user's events",
    responses={404: {"description": "User not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_user_events(
    request: Request,
    user_id: str,
    user: CurrentUser,
    service: EventService = Depends(get_event_service),
) -> UserEventsResponse:
    """Events the user hosts and attends."""
    events = await service.list_for_user(user_id)
    return UserEventsResponse(
        data=UserEventsData(
            hosting=[EventResponse.model_validate(e) for e in events.hosting],
            attending=[EventResponse.model_validate(e) for e in events.attending],
        )
    )
