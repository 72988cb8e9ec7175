"""FastAPI dependency utilities."""

from collections.abc import Generator

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from approvals.bootstrap import Services
from approvals.domain.entities import User
from approvals.domain.errors import ApprovalsError
from approvals.infrastructure.repositories import UserRepository


def get_services(request: Request) -> Services:
    """Return the components wired at application start-up."""

    return request.app.state.services


def get_db(services: Services = Depends(get_services)) -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = services.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    x_user_id: int | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    """Return the user identified by the ``X-User-Id`` header.

    Identity is established by the gateway in front of this service.
    """

    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )

    user = UserRepository(db).get(x_user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the current user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Ensure the current user has administrator privileges."""

    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def to_http_exception(exc: ApprovalsError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


__all__ = [
    "get_current_active_user",
    "get_current_user",
    "get_db",
    "get_services",
    "require_admin",
    "to_http_exception",
]
