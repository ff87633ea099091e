"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TASK_NOT_VERIFIABLE = "TASK_NOT_VERIFIABLE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    # Conflict errors (409)
    DISPLAY_NAME_TAKEN = "DISPLAY_NAME_TAKEN"
    TASK_ALREADY_COMPLETED = "TASK_ALREADY_COMPLETED"
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authenticated, but not allowed to touch the resource."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class EventNotFoundError(AppException):
    """Event not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.EVENT_NOT_FOUND,
            message=f"Event not found: {event_id}",
            status_code=404,
            details={"event_id": event_id},
        )


class UserNotFoundError(AppException):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message=f"User not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class UnknownTaskError(AppException):
    """Task id is not in the catalog."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {task_id}",
            status_code=404,
            details={"task_id": task_id},
        )


class DomainValidationError(AppException):
    """Input rejected by a business rule before any write."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class TaskNotVerifiableError(AppException):
    """Task does not accept photo proof."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_VERIFIABLE,
            message="Task verification not supported",
            status_code=400,
            details={"task_id": task_id},
        )


class FileTooLargeError(AppException):
    """Uploaded file exceeds the configured limit."""

    def __init__(self, max_bytes: int) -> None:
        super().__init__(
            error_code=ErrorCode.FILE_TOO_LARGE,
            message=f"File exceeds the {max_bytes // (1024 * 1024)}MB limit",
            status_code=400,
            details={"max_bytes": max_bytes},
        )


class DisplayNameTakenError(AppException):
    """Display name already belongs to another user."""

    def __init__(self, display_name: str) -> None:
        super().__init__(
            error_code=ErrorCode.DISPLAY_NAME_TAKEN,
            message="This display name is already taken",
            status_code=409,
            details={"display_name": display_name},
        )


class TaskAlreadyCompletedError(AppException):
    """Non-repeatable task was already completed."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_ALREADY_COMPLETED,
            message="Task already completed",
            status_code=409,
            details={"task_id": task_id},
        )


class ConcurrentUpdateError(AppException):
    """Record changed between read and write; the caller may retry."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONCURRENT_UPDATE,
            message=f"The {entity_type} was modified by another request, please retry",
            status_code=409,
            details={"entity_type": entity_type, "entity_id": entity_id},
        )


class UpstreamServiceError(AppException):
    """A third-party call (storage, classifier) failed."""

    def __init__(self, service: str, message: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.UPSTREAM_FAILURE,
            message=message or f"Upstream service failed: {service}",
            status_code=502,
            details={"service": service},
        )
