"""Task catalog and proof verification service."""

import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from core.exceptions import (
    FileTooLargeError,
    TaskAlreadyCompletedError,
    TaskNotVerifiableError,
    UnknownTaskError,
    UserNotFoundError,
)
from domain.entities.task import PROOF_PROMPTS, TASKS, Task, is_known_task
from domain.entities.user import PointsResult
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.points_service import PointsService
from infrastructure.storage.provider import IObjectStorage
from infrastructure.vision.provider import IImageClassifier

logger = structlog.get_logger()

MAX_FILENAME_LENGTH = 100


@dataclass(frozen=True, slots=True)
class TaskProgress:
    """A catalog task with the user's completion state."""

    task: Task
    completed: bool
    completion_count: int


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of a proof submission."""

    is_valid: bool
    proof_url: str
    points: PointsResult | None = None


@dataclass(frozen=True, slots=True)
class StoredFile:
    """An uploaded object and its public URL."""

    path: str
    url: str
    size: int


def proof_path(user_id: str, filename: str) -> str:
    """Storage key for an uploaded proof image."""
    safe_name = (filename or "upload").replace("/", "_")[:MAX_FILENAME_LENGTH]
    return f"task-proofs/{user_id}/{int(time.time() * 1000)}-{safe_name}"


class TaskService:
    """Service layer for gamification tasks."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        points_service: PointsService,
        storage: IObjectStorage,
        classifier: IImageClassifier,
        max_upload_bytes: int = 10 * 1024 * 1024,
    ) -> None:
        self._uow_factory = uow_factory
        self._points = points_service
        self._storage = storage
        self._classifier = classifier
        self._max_upload_bytes = max_upload_bytes

    @property
    def max_upload_bytes(self) -> int:
        return self._max_upload_bytes

    async def list_tasks(self, user_id: str) -> list[TaskProgress]:
        """The whole catalog annotated with the user's progress."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(user_id)

        return [
            TaskProgress(
                task=task,
                completed=user.has_completed(task.id),
                completion_count=user.completion_count(task.id),
            )
            for task in TASKS.values()
        ]

    async def store_upload(
        self, user_id: str, filename: str, data: bytes, content_type: str
    ) -> StoredFile:
        """Upload a proof image under the user's folder."""
        if len(data) > self._max_upload_bytes:
            raise FileTooLargeError(self._max_upload_bytes)

        path = proof_path(user_id, filename)
        url = await self._storage.upload(path, data, content_type)
        return StoredFile(path=path, url=url, size=len(data))

    async def verify_and_complete(
        self,
        user_id: str,
        task_id: str,
        image: bytes,
        content_type: str,
        filename: str = "proof",
    ) -> VerificationResult:
        """Check a photo proof with the classifier and award points if it passes."""
        if not is_known_task(task_id):
            raise UnknownTaskError(task_id)
        task = TASKS[task_id]
        prompt = PROOF_PROMPTS.get(task_id)
        if not task.require_proof or prompt is None:
            raise TaskNotVerifiableError(task_id)

        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(user_id)
        if not task.repeatable and user.has_completed(task_id):
            raise TaskAlreadyCompletedError(task_id)

        proof_url = (await self.store_upload(user_id, filename, image, content_type)).url
        is_valid = await self._classifier.classify(image, content_type, prompt)

        if not is_valid:
            logger.info("task_proof_rejected", user_id=user_id, task_id=task_id)
            return VerificationResult(is_valid=False, proof_url=proof_url)

        points = await self._points.award_points(user_id, task_id)
        logger.info("task_proof_accepted", user_id=user_id, task_id=task_id)
        return VerificationResult(is_valid=True, proof_url=proof_url, points=points)
