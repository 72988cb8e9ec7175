"""Domain entity representing a user's approval of a project."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Acceptance:
    """One user's recorded approval of one project."""

    id: int | None
    project_id: int
    user_id: int
    note: str | None
    accepted_at: datetime | None


__all__ = ["Acceptance"]
