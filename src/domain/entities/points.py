"""Points transaction log entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class PointTransaction:
    """Append-only record of a single award or deduction."""

    user_id: str
    task_id: str
    points_delta: int
    balance_after: int
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
