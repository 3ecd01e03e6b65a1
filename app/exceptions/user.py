"""User-related exceptions."""

from .base import ConflictError, NotFoundError


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message=message, error_code="USER_NOT_FOUND")


class EmailAlreadyTakenError(ConflictError):
    """Raised when an email is already used by another account."""

    def __init__(self, message: str = "A user with this email already exists"):
        super().__init__(message=message, error_code="EMAIL_ALREADY_TAKEN")
