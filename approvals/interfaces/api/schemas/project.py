"""Schemas for project endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from approvals.domain.entities import ProjectStatus


class ProjectCreate(BaseModel):
    """Payload required to create a project."""

    title: str
    description: str | None = None
    proposed_amount: Decimal
    required_approvals: int = 1


class ProjectUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    proposed_amount: Decimal | None = None
    required_approvals: int | None = None

    model_config = ConfigDict(extra="forbid")


class ProjectRead(BaseModel):
    id: int
    title: str
    description: str
    proposed_amount: Decimal
    required_approvals: int
    current_approvals: int
    status: ProjectStatus
    created_by: int
    assigned_to: int | None
    created_at: datetime | None
    updated_at: datetime | None
    deleted_at: datetime | None
    reminder_sent_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class AcceptProjectRequest(BaseModel):
    note: str | None = None


class AssignProjectRequest(BaseModel):
    assigned_to_id: int = Field(..., description="Identifier of the user receiving the project")


class AcceptanceRead(BaseModel):
    id: int
    project_id: int
    user_id: int
    note: str | None
    accepted_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class ProjectStatsRead(BaseModel):
    total: int
    by_status: dict[ProjectStatus, int] = Field(default_factory=dict)


__all__ = [
    "AcceptProjectRequest",
    "AcceptanceRead",
    "AssignProjectRequest",
    "ProjectCreate",
    "ProjectRead",
    "ProjectStatsRead",
    "ProjectUpdate",
]
