"""Use case for registering workflow participants."""

from sqlalchemy.orm import Session

from approvals.domain.entities import NotificationPreferences, User, UserRole
from approvals.domain.errors import ConflictError, ValidationError
from approvals.infrastructure.repositories import UserRepository
from approvals.utils import now_in_app_timezone


def create_user(
    session: Session,
    *,
    name: str,
    role: UserRole = UserRole.USER,
    email: str | None = None,
    phone: str | None = None,
    push_token: str | None = None,
    preferences: NotificationPreferences | None = None,
    is_active: bool = True,
) -> User:
    """Create a new user ensuring unique email addresses."""

    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")

    normalized_email = email.strip().lower() if email else None
    if normalized_email is not None and "@" not in normalized_email:
        raise ValidationError("Email address is not valid")

    repository = UserRepository(session)
    if normalized_email and repository.get_by_email(normalized_email):
        raise ConflictError("Email address is already registered")

    user = User(
        id=None,
        name=name,
        role=UserRole(role),
        email=normalized_email,
        phone=phone.strip() if phone else None,
        push_token=push_token or None,
        is_active=is_active,
        preferences=preferences or NotificationPreferences(),
        created_at=now_in_app_timezone(),
    )
    return repository.create(user)
