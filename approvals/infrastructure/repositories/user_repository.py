"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from approvals.domain.entities import NotificationPreferences, User, UserRole
from approvals.domain.errors import NotFoundError
from approvals.infrastructure.models import UserModel
from approvals.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class UserRepository:
    """Directory of workflow participants backed by the ``user`` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def list_active_by_role(self, role: UserRole) -> Sequence[User]:
        query = (
            self.session.query(UserModel)
            .filter(UserModel.is_active.is_(True))
            .filter(UserModel.role == role.value)
            .order_by(UserModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        model.created_at = ensure_app_naive_datetime(
            user.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, user: User) -> User:
        model = self.session.get(UserModel, user.id)
        if model is None:
            raise NotFoundError(f"User with id {user.id} not found")
        self._apply_entity_to_model(model, user)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.name = user.name
        model.email = user.email.strip().lower() if user.email else None
        model.phone = user.phone
        model.push_token = user.push_token
        model.role = UserRole(user.role).value
        model.is_active = user.is_active
        model.notification_preferences = user.preferences.to_dict()

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            role=UserRole(model.role),
            email=model.email,
            phone=model.phone,
            push_token=model.push_token,
            is_active=model.is_active,
            preferences=NotificationPreferences.from_mapping(
                model.notification_preferences
            ),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserRepository"]
