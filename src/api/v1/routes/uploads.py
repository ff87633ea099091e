"""File upload API routes."""

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_task_service
from api.v1.schemas.upload import UploadData, UploadResponse
from core.exceptions import FileTooLargeError
from core.rate_limit import WRITE_LIMIT, limiter
from domain.services.task_service import TaskService

router = APIRouter(prefix="/uploads", tags=["uploads"])


async def read_limited(file: UploadFile, limit: int) -> bytes:
    """Read an upload, stopping one byte past ``limit``.

    Raises:
        FileTooLargeError: If the declared or actual size exceeds ``limit``
    """
    if file.size is not None and file.size > limit:
        raise FileTooLargeError(limit)
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise FileTooLargeError(limit)
    return data


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an image",
    responses={
        400: {"description": "File too large"},
        502: {"description": "Storage failure"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def upload_file(
    request: Request,
    user: CurrentUser,
    file: UploadFile = File(...),
    service: TaskService = Depends(get_task_service),
) -> UploadResponse:
    """Store an image in the caller's folder and return its public URL."""
    data = await read_limited(file, service.max_upload_bytes)
    content_type = file.content_type or "image/jpeg"
    stored = await service.store_upload(user.id, file.filename or "upload", data, content_type)
    return UploadResponse(
        data=UploadData(
            url=stored.url, path=stored.path, size=stored.size, content_type=content_type
        )
    )
