"""User domain entity and points ledger transitions."""

import re
from dataclasses import dataclass, field
from datetime import datetime

from domain.entities.task import Task

DISPLAY_NAME_PATTERN = re.compile(r"^[a-z0-9_]+$")
DISPLAY_NAME_MAX_LENGTH = 32

# Vibe palette: emoji -> label
VIBES: dict[str, str] = {
    "🎉": "Party",
    "🍄": "Psychedelics",
    "🏄‍♂️": "Surf",
    "🏖️": "Beach",
    "🍜": "Food",
    "🍺": "Drinks",
    "🧘‍♀️": "Meditation",
    "🎨": "Art",
}
MAX_VIBES = 3


def is_valid_display_name(value: str) -> bool:
    """Lowercase letters, digits and underscores only."""
    return 0 < len(value) <= DISPLAY_NAME_MAX_LENGTH and bool(DISPLAY_NAME_PATTERN.match(value))


def invalid_vibes(vibes: list[str]) -> list[str]:
    """Return the vibes that are not in the palette."""
    return [v for v in vibes if v not in VIBES]


@dataclass(frozen=True, slots=True)
class PointsResult:
    """Outcome of a ledger mutation."""

    points_delta: int
    new_total: int


@dataclass
class User:
    """Domain entity for a Jelloverse user.

    ``id`` is the opaque subject identifier issued by the external auth
    provider. ``version`` increments on every ledger write and is used for
    optimistic concurrency control.
    """

    id: str
    display_name: str | None = None
    bio: str | None = None
    vibes: list[str] = field(default_factory=list)
    avatar_url: str | None = None
    timezone: str | None = None
    num_points: int = 0
    completed_tasks: list[str] = field(default_factory=list)
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_onboarded(self) -> bool:
        return bool(self.display_name)

    def has_completed(self, task_id: str) -> bool:
        return task_id in self.completed_tasks

    def completion_count(self, task_id: str) -> int:
        return self.completed_tasks.count(task_id)

    def award(self, task: Task, check_completion: bool = True) -> PointsResult | None:
        """Add the task's points and record the completion.

        Returns None without touching state when ``check_completion`` is set
        and a non-repeatable task is already completed.
        """
        if check_completion and not task.repeatable and self.has_completed(task.id):
            return None

        self.num_points = (self.num_points or 0) + task.points
        # Duplicates are kept for repeatable tasks
        self.completed_tasks = [*self.completed_tasks, task.id]
        return PointsResult(points_delta=task.points, new_total=self.num_points)

    def deduct(self, task: Task) -> PointsResult:
        """Remove the task's points (clamped at 0) and its completion record.

        Non-repeatable tasks lose every occurrence, repeatable tasks only the
        most recently appended one.
        """
        self.num_points = max(0, (self.num_points or 0) - task.points)

        remaining = list(self.completed_tasks)
        if not task.repeatable:
            remaining = [t for t in remaining if t != task.id]
        elif task.id in remaining:
            last_index = len(remaining) - 1 - remaining[::-1].index(task.id)
            del remaining[last_index]
        self.completed_tasks = remaining

        return PointsResult(points_delta=-task.points, new_total=self.num_points)
