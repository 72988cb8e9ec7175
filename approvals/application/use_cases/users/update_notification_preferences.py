"""Use case for changing the channels a user is notified on."""

from dataclasses import replace

from sqlalchemy.orm import Session

from approvals.domain.entities import User
from approvals.domain.errors import NotFoundError, ValidationError
from approvals.infrastructure.repositories import UserRepository


def update_notification_preferences(
    session: Session,
    *,
    user_id: int,
    push: bool | None = None,
    sms: bool | None = None,
    email: bool | None = None,
    in_app: bool | None = None,
) -> User:
    """Apply the given flags to the stored preferences.

    Flags left as ``None`` keep their current value.
    """

    changes = {
        key: value
        for key, value in (("push", push), ("sms", sms), ("email", email), ("in_app", in_app))
        if value is not None
    }
    for key, value in changes.items():
        if not isinstance(value, bool):
            raise ValidationError(f"{key} must be a boolean")

    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        raise NotFoundError("User not found")

    user.preferences = replace(user.preferences, **changes)
    return repository.update(user)
