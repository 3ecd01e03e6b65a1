"""Project and membership exceptions."""

from .base import ConflictError, NotFoundError


class ProjectNotFoundError(NotFoundError):
    """Raised when a project is not found."""

    def __init__(self, message: str = "Project not found"):
        super().__init__(message=message, error_code="PROJECT_NOT_FOUND")


class MembershipNotFoundError(NotFoundError):
    """Raised when a user has no membership row for a project."""

    minimal_body = True

    def __init__(self, message: str = "User is not part of this project."):
        super().__init__(message=message, error_code="MEMBERSHIP_NOT_FOUND")


class DuplicateMembershipError(ConflictError):
    """Raised when adding a user who is already a member of the project."""

    def __init__(self, message: str = "User is already a member of this project"):
        super().__init__(message=message, error_code="DUPLICATE_MEMBERSHIP")
