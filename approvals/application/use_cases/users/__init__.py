"""Use cases for managing users."""

from .create_user import create_user
from .update_notification_preferences import update_notification_preferences
from .update_push_token import update_push_token

__all__ = ["create_user", "update_notification_preferences", "update_push_token"]
