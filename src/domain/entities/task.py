"""Gamification task catalog."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class Task:
    """A unit of work that earns points when completed."""

    id: str
    title: str
    description: str
    points: int
    repeatable: bool
    require_proof: bool


class TaskIds:
    """Task identifier constants."""

    SIGN_UP = "SIGN_UP"
    CREATE_JAM = "CREATE_JAM"
    ATTEND_JAM = "ATTEND_JAM"
    RIDE_TOKTOK = "RIDE_TOKTOK"


TASKS: Mapping[str, Task] = MappingProxyType(
    {
        TaskIds.SIGN_UP: Task(
            id=TaskIds.SIGN_UP,
            title="Welcome to the Jelloverse!",
            description="Create your account and profile",
            points=10,
            repeatable=False,
            require_proof=False,
        ),
        TaskIds.CREATE_JAM: Task(
            id=TaskIds.CREATE_JAM,
            title="Jam Creator",
            description="Create a jam",
            points=10,
            repeatable=True,
            require_proof=False,
        ),
        TaskIds.ATTEND_JAM: Task(
            id=TaskIds.ATTEND_JAM,
            title="Jiggle Time!",
            description="Attend a jam. The more you attend, the more ⭐ you earn!",
            points=10,
            repeatable=True,
            require_proof=False,
        ),
        TaskIds.RIDE_TOKTOK: Task(
            id=TaskIds.RIDE_TOKTOK,
            title="TukTuk Rider",
            description="Ride a TukTuk",
            points=10,
            repeatable=False,
            require_proof=True,
        ),
    }
)

# Classifier prompts for proof-gated tasks
PROOF_PROMPTS: Mapping[str, str] = MappingProxyType(
    {
        TaskIds.RIDE_TOKTOK: (
            "Is this a photo of someone riding or sitting in a tuk-tuk/auto-rickshaw? "
            "The photo should clearly show someone inside a tuk-tuk or auto-rickshaw. "
            "Please respond with just 'true' or 'false'."
        ),
    }
)


def get_task(task_id: str) -> Task:
    """Look up a catalog task. Raises KeyError for unknown ids."""
    return TASKS[task_id]


def is_known_task(task_id: str) -> bool:
    """Check whether a task id exists in the catalog."""
    return task_id in TASKS
