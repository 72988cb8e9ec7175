"""Error taxonomy shared by the approval workflow."""

from __future__ import annotations


class ApprovalsError(Exception):
    """Base class for errors that surface the outcome of a rejected operation."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ApprovalsError, ValueError):
    """Malformed input or an illegal state transition."""

    status_code = 400


class NotFoundError(ApprovalsError):
    """A referenced entity does not exist or is not visible."""

    status_code = 404


class ForbiddenError(ApprovalsError):
    """The acting user lacks the role or ownership the operation requires."""

    status_code = 403


class ConflictError(ApprovalsError):
    """A uniqueness constraint would be violated."""

    status_code = 409


class ProjectDeletedError(NotFoundError, ValidationError):
    """Raised when an operation targets a soft-deleted project.

    A deleted project is hidden from reads and cannot take part in any further
    transition, so this error is both a :class:`NotFoundError` and a
    :class:`ValidationError`.
    """

    def __init__(self, message: str = "Project has been deleted") -> None:
        super().__init__(message)


__all__ = [
    "ApprovalsError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
    "ProjectDeletedError",
]
