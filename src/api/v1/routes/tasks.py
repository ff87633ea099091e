"""Gamification task API routes."""

from fastapi import APIRouter, Depends, File, Request, UploadFile

from api.v1.dependencies import Account, get_task_service
from api.v1.routes.uploads import read_limited
from api.v1.schemas.event import PointsChange
from api.v1.schemas.task import (
    TaskListResponse,
    TaskResponse,
    VerificationData,
    VerificationResponse,
)
from core.rate_limit import READ_LIMIT, VERIFY_LIMIT, limiter
from domain.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse, summary="List tasks")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_tasks(
    request: Request,
    account: Account,
    service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    """The task catalog with the caller's progress on each task."""
    progress = await service.list_tasks(account.id)
    return TaskListResponse(
        data=[
            TaskResponse(
                id=p.task.id,
                title=p.task.title,
                description=p.task.description,
                points=p.task.points,
                repeatable=p.task.repeatable,
                require_proof=p.task.require_proof,
                completed=p.completed,
                completion_count=p.completion_count,
            )
            for p in progress
        ],
        meta={"total_points": account.num_points},
    )


@router.post(
    "/{task_id}/verify",
    response_model=VerificationResponse,
    summary="Submit a photo proof",
    responses={
        200: {"description": "Proof checked; points awarded when valid"},
        400: {"description": "Task does not take proofs, or file too large"},
        404: {"description": "Unknown task"},
        409: {"description": "Task already completed"},
        502: {"description": "Storage or classifier failure"},
    },
)
@limiter.limit(VERIFY_LIMIT)  # type: ignore[untyped-decorator]
async def verify_task(
    request: Request,
    task_id: str,
    account: Account,
    file: UploadFile = File(..., description="Photo proof"),
    service: TaskService = Depends(get_task_service),
) -> VerificationResponse:
    """
    Upload a photo proof for a proof-gated task.

    The photo is stored, then checked by the image classifier. A valid proof
    completes the task and awards its points.
    """
    image = await read_limited(file, service.max_upload_bytes)
    result = await service.verify_and_complete(
        account.id,
        task_id,
        image,
        content_type=file.content_type or "image/jpeg",
        filename=file.filename or "proof",
    )
    points = (
        PointsChange(points_delta=result.points.points_delta, new_total=result.points.new_total)
        if result.points
        else None
    )
    return VerificationResponse(
        data=VerificationData(
            task_id=task_id,
            is_valid=result.is_valid,
            proof_url=result.proof_url,
            points=points,
        )
    )
