"""Task-related exceptions."""

from .base import BaseAppException, NotFoundError


class TaskNotFoundError(NotFoundError):
    """Raised when a task is not found."""

    def __init__(self, message: str = "Task not found"):
        super().__init__(message=message, error_code="TASK_NOT_FOUND")


class InvalidTaskOperationError(BaseAppException):
    """Raised when a task write is rejected before or during persistence."""

    def __init__(self, message: str = "Invalid task operation"):
        super().__init__(message=message, status_code=400, error_code="INVALID_TASK_OPERATION")
