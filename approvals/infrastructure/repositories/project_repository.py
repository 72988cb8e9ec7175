"""Persistence helpers for projects and their acceptances."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from approvals.domain.entities import Acceptance, Project, ProjectStatus
from approvals.domain.errors import ValidationError
from approvals.infrastructure.models import AcceptanceModel, ProjectModel
from approvals.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


@dataclass(frozen=True)
class AcceptanceRecord:
    """Result of the atomic acceptance write."""

    acceptance: Acceptance
    approved_now: bool


class ProjectRepository:
    """Provide CRUD operations and guarded transitions for :class:`Project`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, project_id: int, *, include_deleted: bool = False) -> Project | None:
        query = self.session.query(ProjectModel).filter(ProjectModel.id == project_id)
        if not include_deleted:
            query = query.filter(ProjectModel.deleted_at.is_(None))
        model = query.first()
        return self._to_entity(model) if model else None

    def list(
        self,
        *,
        status: ProjectStatus | None = None,
        created_by: int | None = None,
        assigned_to: int | None = None,
        include_deleted: bool = False,
        skip: int = 0,
        limit: int | None = 100,
    ) -> Sequence[Project]:
        query = self.session.query(ProjectModel)
        if status is not None:
            query = query.filter(ProjectModel.status == ProjectStatus(status).value)
        if created_by is not None:
            query = query.filter(ProjectModel.created_by == created_by)
        if assigned_to is not None:
            query = query.filter(ProjectModel.assigned_to == assigned_to)
        if not include_deleted:
            query = query.filter(ProjectModel.deleted_at.is_(None))
        query = query.order_by(ProjectModel.created_at.desc(), ProjectModel.id.desc())
        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_pending_not_accepted_by(self, user_id: int) -> Sequence[Project]:
        accepted = select(AcceptanceModel.project_id).where(
            AcceptanceModel.user_id == user_id
        )
        query = (
            self.session.query(ProjectModel)
            .filter(ProjectModel.status == ProjectStatus.PENDING.value)
            .filter(ProjectModel.deleted_at.is_(None))
            .filter(ProjectModel.id.not_in(accepted))
            .order_by(ProjectModel.created_at.desc(), ProjectModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, project: Project) -> Project:
        model = ProjectModel()
        self._apply_entity_to_model(model, project)
        model.created_at = ensure_app_naive_datetime(
            project.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def patch(
        self,
        project_id: int,
        changes: Mapping[str, Any],
        *,
        updated_at: datetime,
    ) -> bool:
        """Write ``changes`` to a live project in a single guarded UPDATE.

        A new ``required_approvals`` only applies while the project is PENDING
        and still short of the new threshold.
        """

        query = self.session.query(ProjectModel).filter(
            ProjectModel.id == project_id,
            ProjectModel.deleted_at.is_(None),
        )
        if "required_approvals" in changes:
            query = query.filter(
                ProjectModel.status == ProjectStatus.PENDING.value,
                ProjectModel.current_approvals < changes["required_approvals"],
            )
        values = {getattr(ProjectModel, name): value for name, value in changes.items()}
        values[ProjectModel.updated_at] = ensure_app_naive_datetime(updated_at)
        updated = query.update(values, synchronize_session=False)
        self.session.commit()
        return updated == 1

    def record_acceptance(
        self,
        *,
        project_id: int,
        user_id: int,
        note: str | None,
        accepted_at: datetime,
    ) -> AcceptanceRecord:
        """Insert an acceptance and advance the approval counter atomically.

        The PENDING precondition, the increment and the threshold transition
        run inside one transaction. The transition is a compare-and-swap on the
        status column, so exactly one acceptance observes ``approved_now``.
        """

        stamp = ensure_app_naive_datetime(accepted_at)
        try:
            incremented = (
                self.session.query(ProjectModel)
                .filter(
                    ProjectModel.id == project_id,
                    ProjectModel.status == ProjectStatus.PENDING.value,
                    ProjectModel.deleted_at.is_(None),
                )
                .update(
                    {ProjectModel.current_approvals: ProjectModel.current_approvals + 1},
                    synchronize_session=False,
                )
            )
            if incremented != 1:
                raise ValidationError("Project is no longer accepting approvals")

            model = AcceptanceModel(
                project_id=project_id,
                user_id=user_id,
                note=note,
                accepted_at=stamp,
            )
            self.session.add(model)
            try:
                self.session.flush()
            except IntegrityError as exc:
                raise ValidationError("You have already accepted this project") from exc

            transitioned = (
                self.session.query(ProjectModel)
                .filter(
                    ProjectModel.id == project_id,
                    ProjectModel.status == ProjectStatus.PENDING.value,
                    ProjectModel.current_approvals >= ProjectModel.required_approvals,
                )
                .update(
                    {
                        ProjectModel.status: ProjectStatus.APPROVED.value,
                        ProjectModel.updated_at: stamp,
                    },
                    synchronize_session=False,
                )
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(model)
        return AcceptanceRecord(
            acceptance=self._acceptance_to_entity(model),
            approved_now=transitioned == 1,
        )

    def assign(self, project_id: int, *, assigned_to: int, assigned_at: datetime) -> bool:
        """Set the assignee unless the project was deleted or assigned meanwhile."""

        updated = (
            self.session.query(ProjectModel)
            .filter(
                ProjectModel.id == project_id,
                ProjectModel.deleted_at.is_(None),
                ProjectModel.status.in_(
                    [ProjectStatus.PENDING.value, ProjectStatus.APPROVED.value]
                ),
            )
            .update(
                {
                    ProjectModel.assigned_to: assigned_to,
                    ProjectModel.status: ProjectStatus.ASSIGNED.value,
                    ProjectModel.updated_at: ensure_app_naive_datetime(assigned_at),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def soft_delete(self, project_id: int, *, deleted_at: datetime) -> bool:
        stamp = ensure_app_naive_datetime(deleted_at)
        updated = (
            self.session.query(ProjectModel)
            .filter(ProjectModel.id == project_id, ProjectModel.deleted_at.is_(None))
            .update(
                {
                    ProjectModel.status: ProjectStatus.DELETED.value,
                    ProjectModel.deleted_at: stamp,
                    ProjectModel.updated_at: stamp,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def has_acceptance(self, project_id: int, user_id: int) -> bool:
        query = self.session.query(AcceptanceModel.id).filter(
            AcceptanceModel.project_id == project_id,
            AcceptanceModel.user_id == user_id,
        )
        return query.first() is not None

    def list_acceptances(self, project_id: int) -> Sequence[Acceptance]:
        query = (
            self.session.query(AcceptanceModel)
            .filter(AcceptanceModel.project_id == project_id)
            .order_by(AcceptanceModel.accepted_at.desc(), AcceptanceModel.id.desc())
        )
        return [self._acceptance_to_entity(model) for model in query.all()]

    def list_acceptor_ids(self, project_id: int) -> set[int]:
        query = self.session.query(AcceptanceModel.user_id).filter(
            AcceptanceModel.project_id == project_id
        )
        return {user_id for (user_id,) in query.all()}

    def list_needing_reminder(self, cutoff: datetime) -> Sequence[Project]:
        query = self._needing_reminder_query(cutoff).order_by(
            ProjectModel.created_at.asc(), ProjectModel.id.asc()
        )
        return [self._to_entity(model) for model in query.all()]

    def count_needing_reminder(self, cutoff: datetime) -> int:
        return self._needing_reminder_query(cutoff).count()

    def count_pending(self) -> int:
        return (
            self.session.query(ProjectModel)
            .filter(ProjectModel.status == ProjectStatus.PENDING.value)
            .filter(ProjectModel.deleted_at.is_(None))
            .count()
        )

    def count_reminded_since(self, since: datetime) -> int:
        return (
            self.session.query(ProjectModel)
            .filter(ProjectModel.status == ProjectStatus.PENDING.value)
            .filter(ProjectModel.reminder_sent_at >= ensure_app_naive_datetime(since))
            .count()
        )

    def count_by_status(self) -> dict[ProjectStatus, int]:
        rows = (
            self.session.query(ProjectModel.status, func.count(ProjectModel.id))
            .group_by(ProjectModel.status)
            .all()
        )
        counts = {status: 0 for status in ProjectStatus}
        for status, total in rows:
            counts[ProjectStatus(status)] = total
        return counts

    def mark_reminder_sent(self, project_id: int, *, sent_at: datetime) -> None:
        self.session.query(ProjectModel).filter(ProjectModel.id == project_id).update(
            {ProjectModel.reminder_sent_at: ensure_app_naive_datetime(sent_at)},
            synchronize_session=False,
        )
        self.session.commit()

    def _needing_reminder_query(self, cutoff: datetime):
        naive_cutoff = ensure_app_naive_datetime(cutoff)
        return (
            self.session.query(ProjectModel)
            .filter(ProjectModel.status == ProjectStatus.PENDING.value)
            .filter(ProjectModel.deleted_at.is_(None))
            .filter(ProjectModel.created_at < naive_cutoff)
            .filter(
                or_(
                    ProjectModel.reminder_sent_at.is_(None),
                    ProjectModel.reminder_sent_at < naive_cutoff,
                )
            )
        )

    @staticmethod
    def _apply_entity_to_model(model: ProjectModel, project: Project) -> None:
        model.title = project.title
        model.description = project.description
        model.proposed_amount = project.proposed_amount
        model.required_approvals = project.required_approvals
        model.current_approvals = project.current_approvals
        model.status = ProjectStatus(project.status).value
        model.created_by = project.created_by
        model.assigned_to = project.assigned_to
        model.updated_at = ensure_app_naive_datetime(project.updated_at)
        model.deleted_at = ensure_app_naive_datetime(project.deleted_at)
        model.reminder_sent_at = ensure_app_naive_datetime(project.reminder_sent_at)

    @staticmethod
    def _to_entity(model: ProjectModel) -> Project:
        return Project(
            id=model.id,
            title=model.title,
            description=model.description,
            proposed_amount=Decimal(str(model.proposed_amount)),
            required_approvals=model.required_approvals,
            current_approvals=model.current_approvals,
            status=ProjectStatus(model.status),
            created_by=model.created_by,
            assigned_to=model.assigned_to,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            deleted_at=ensure_app_timezone(model.deleted_at),
            reminder_sent_at=ensure_app_timezone(model.reminder_sent_at),
        )

    @staticmethod
    def _acceptance_to_entity(model: AcceptanceModel) -> Acceptance:
        return Acceptance(
            id=model.id,
            project_id=model.project_id,
            user_id=model.user_id,
            note=model.note,
            accepted_at=ensure_app_timezone(model.accepted_at),
        )


__all__ = ["AcceptanceRecord", "ProjectRepository"]
