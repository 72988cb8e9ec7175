"""Routes for the project approval workflow."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from approvals.application.use_cases.projects import (
    accept_project as accept_project_uc,
    assign_project as assign_project_uc,
    create_project as create_project_uc,
    delete_project as delete_project_uc,
    get_project as get_project_uc,
    get_project_stats as get_project_stats_uc,
    list_pending_projects_for_user as list_pending_projects_for_user_uc,
    list_project_acceptances as list_project_acceptances_uc,
    list_projects as list_projects_uc,
    update_project as update_project_uc,
)
from approvals.bootstrap import Services
from approvals.domain.entities import ProjectStatus, User
from approvals.domain.errors import ApprovalsError
from approvals.interfaces.api.dependencies import (
    get_current_active_user,
    get_db,
    get_services,
    require_admin,
    to_http_exception,
)
from approvals.interfaces.api.schemas import (
    AcceptProjectRequest,
    AcceptanceRead,
    AssignProjectRequest,
    ProjectCreate,
    ProjectRead,
    ProjectStatsRead,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/", response_model=list[ProjectRead])
def list_projects(
    status_filter: ProjectStatus | None = Query(default=None, alias="status"),
    created_by: int | None = None,
    assigned_to: int | None = None,
    include_deleted: bool = False,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> list[ProjectRead]:
    projects = list_projects_uc(
        db,
        status=status_filter,
        created_by=created_by,
        assigned_to=assigned_to,
        include_deleted=include_deleted,
        skip=skip,
        limit=limit,
    )
    return [ProjectRead.model_validate(project) for project in projects]


@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(require_admin),
) -> ProjectRead:
    try:
        project = create_project_uc(
            db,
            notifier=services.notifier,
            title=payload.title,
            description=payload.description,
            proposed_amount=payload.proposed_amount,
            required_approvals=payload.required_approvals,
            created_by=current_user.id,
        )
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return ProjectRead.model_validate(project)


@router.get("/stats", response_model=ProjectStatsRead)
def read_project_stats(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> ProjectStatsRead:
    stats = get_project_stats_uc(db)
    return ProjectStatsRead(total=stats.total, by_status=stats.by_status)


@router.get("/pending/me", response_model=list[ProjectRead])
def list_my_pending_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[ProjectRead]:
    """Return the pending projects the current user has not accepted yet."""

    projects = list_pending_projects_for_user_uc(db, current_user.id)
    return [ProjectRead.model_validate(project) for project in projects]


@router.get("/{project_id}", response_model=ProjectRead)
def read_project(
    project_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> ProjectRead:
    try:
        project = get_project_uc(db, project_id)
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return ProjectRead.model_validate(project)


@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ProjectRead:
    try:
        project = update_project_uc(
            db,
            project_id=project_id,
            actor_id=current_user.id,
            **payload.model_dump(exclude_unset=True),
        )
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return ProjectRead.model_validate(project)


@router.delete("/{project_id}", response_model=ProjectRead)
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(get_current_active_user),
) -> ProjectRead:
    try:
        project = delete_project_uc(
            db,
            notifier=services.notifier,
            project_id=project_id,
            actor_id=current_user.id,
        )
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return ProjectRead.model_validate(project)


@router.post(
    "/{project_id}/accept",
    response_model=AcceptanceRead,
    status_code=status.HTTP_201_CREATED,
)
def accept_project(
    project_id: int,
    payload: AcceptProjectRequest | None = None,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(get_current_active_user),
) -> AcceptanceRead:
    try:
        acceptance = accept_project_uc(
            db,
            notifier=services.notifier,
            project_id=project_id,
            user_id=current_user.id,
            note=payload.note if payload else None,
        )
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return AcceptanceRead.model_validate(acceptance)


@router.post("/{project_id}/assign", response_model=ProjectRead)
def assign_project(
    project_id: int,
    payload: AssignProjectRequest,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: User = Depends(require_admin),
) -> ProjectRead:
    try:
        project = assign_project_uc(
            db,
            notifier=services.notifier,
            project_id=project_id,
            assigned_to_id=payload.assigned_to_id,
            acting_admin_id=current_user.id,
        )
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return ProjectRead.model_validate(project)


@router.get("/{project_id}/acceptances", response_model=list[AcceptanceRead])
def list_project_acceptances(
    project_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> list[AcceptanceRead]:
    try:
        acceptances = list_project_acceptances_uc(db, project_id)
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return [AcceptanceRead.model_validate(acceptance) for acceptance in acceptances]
