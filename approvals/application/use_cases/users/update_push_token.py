"""Use case for registering or clearing a device push token."""

import logging

from sqlalchemy.orm import Session

from approvals.domain.entities import User
from approvals.domain.errors import NotFoundError, ValidationError
from approvals.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)

PUSH_TOKEN_MAX_LENGTH = 255


def update_push_token(session: Session, *, user_id: int, push_token: str | None) -> User:
    """Store ``push_token`` for the user; ``None`` or blank removes it."""

    if push_token is not None and not isinstance(push_token, str):
        raise ValidationError("Push token must be a string")
    normalized = (push_token or "").strip() or None
    if normalized is not None and len(normalized) > PUSH_TOKEN_MAX_LENGTH:
        raise ValidationError(f"Push token must not exceed {PUSH_TOKEN_MAX_LENGTH} characters")

    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        raise NotFoundError("User not found")

    user.push_token = normalized
    updated = repository.update(user)
    logger.info(
        "Push token %s for user %s", "registered" if normalized else "cleared", user_id
    )
    return updated
