# ruff: noqa: D107
"""Base exception classes."""

from typing import Any

from fastapi import HTTPException


class BaseAppException(HTTPException):
    """Base application exception.

    Exceptions with ``minimal_body`` set are rendered as exactly
    ``{"status": false, "message": ...}`` so the response carries nothing
    beyond the fixed message.
    """

    minimal_body = False

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={"message": message, "error_code": error_code, "details": details},
        )

    def to_body(self) -> dict[str, Any]:
        """JSON body returned to the client."""
        body: dict[str, Any] = {"status": False, "message": self.message}
        if not self.minimal_body:
            body["error_code"] = self.error_code
            if self.details:
                body["details"] = self.details
        return body


class NotFoundError(BaseAppException):
    """Exception raised when a resource is not found."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: dict[str, Any] | None = None,
        error_code: str = "NOT_FOUND",
    ):
        super().__init__(message=message, status_code=404, error_code=error_code, details=details)


class AppPermissionError(BaseAppException):
    """Exception raised when user doesn't have permission to access a resource."""

    def __init__(
        self,
        message: str = "Permission denied",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED",
            details=details,
        )


class AuthenticationRequired(BaseAppException):
    """Exception raised when a route needs a caller and none was resolved."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, status_code=401, error_code="AUTHENTICATION_REQUIRED")


class ValidationError(BaseAppException):
    """Exception raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class ConflictError(BaseAppException):
    """Exception raised when a write would violate a uniqueness rule."""

    def __init__(
        self,
        message: str = "Resource already exists",
        error_code: str = "CONFLICT",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, status_code=409, error_code=error_code, details=details)
