"""Domain enumeration describing user roles."""

from enum import Enum


class UserRole(str, Enum):
    """Roles a user can hold in the approval workflow."""

    ADMIN = "ADMIN"
    USER = "USER"


__all__ = ["UserRole"]
