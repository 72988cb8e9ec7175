"""Endpoints for the current user's notification inbox."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from approvals.application.use_cases.notifications import (
    cleanup_old_notifications,
    get_user_notifications,
    mark_all_notifications_as_read,
    mark_notification_as_read,
)
from approvals.domain.entities import User
from approvals.domain.errors import ApprovalsError
from approvals.interfaces.api.dependencies import (
    get_current_active_user,
    get_db,
    require_admin,
    to_http_exception,
)
from approvals.interfaces.api.schemas import (
    CleanupResponse,
    MarkAllReadResponse,
    NotificationPageRead,
    NotificationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationPageRead)
def list_notifications(
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPageRead:
    """Return the most recent notifications for the current user."""

    try:
        page = get_user_notifications(db, user_id=current_user.id, limit=limit, offset=offset)
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return NotificationPageRead(
        notifications=[
            NotificationRead.model_validate(notification)
            for notification in page.notifications
        ],
        unread_count=page.unread_count,
    )


@router.patch("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkAllReadResponse:
    updated = mark_all_notifications_as_read(db, user_id=current_user.id)
    return MarkAllReadResponse(updated=updated)


@router.patch("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    try:
        mark_notification_as_read(db, notification_id=notification_id, user_id=current_user.id)
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/cleanup", response_model=CleanupResponse)
def cleanup_notifications(
    days_old: int = Query(default=90, ge=30, le=365),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> CleanupResponse:
    """Delete read notifications older than ``days_old`` days."""

    try:
        deleted = cleanup_old_notifications(db, days_old=days_old)
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return CleanupResponse(deleted=deleted)
