"""Profile endpoints for the current user."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from approvals.application.use_cases.users import (
    update_notification_preferences as update_notification_preferences_uc,
    update_push_token as update_push_token_uc,
)
from approvals.domain.entities import User
from approvals.domain.errors import ApprovalsError
from approvals.interfaces.api.dependencies import (
    get_current_active_user,
    get_db,
    to_http_exception,
)
from approvals.interfaces.api.schemas import (
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
    PushTokenUpdate,
    UserRead,
)

router = APIRouter(prefix="/users", tags=["users"])


def _to_read_model(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        name=user.name,
        role=user.role,
        email=user.email,
        phone=user.phone,
        is_active=user.is_active,
        has_push_token=bool(user.push_token),
        preferences=NotificationPreferencesRead.model_validate(user.preferences),
    )


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_active_user)) -> UserRead:
    return _to_read_model(current_user)


@router.put("/push-token", response_model=UserRead)
def update_push_token(
    payload: PushTokenUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UserRead:
    """Register the device token used for push notifications, or clear it."""

    try:
        user = update_push_token_uc(db, user_id=current_user.id, push_token=payload.push_token)
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return _to_read_model(user)


@router.put("/notification-preferences", response_model=UserRead)
def update_notification_preferences(
    payload: NotificationPreferencesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UserRead:
    try:
        user = update_notification_preferences_uc(
            db,
            user_id=current_user.id,
            **payload.model_dump(exclude_none=True),
        )
    except ApprovalsError as exc:
        raise to_http_exception(exc) from exc
    return _to_read_model(user)
