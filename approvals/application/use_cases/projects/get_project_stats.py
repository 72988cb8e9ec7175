"""Use case for summarising projects by status."""

from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from approvals.domain.entities import ProjectStatus
from approvals.infrastructure.repositories import ProjectRepository


@dataclass(frozen=True)
class ProjectStats:
    total: int
    by_status: dict[ProjectStatus, int] = field(default_factory=dict)


def get_project_stats(session: Session) -> ProjectStats:
    """Return the number of live projects and the count for every status."""

    counts = ProjectRepository(session).count_by_status()
    total = sum(
        count for status, count in counts.items() if status is not ProjectStatus.DELETED
    )
    return ProjectStats(total=total, by_status=counts)
