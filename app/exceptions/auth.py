"""Authorization exceptions."""

from .base import BaseAppException

ADMIN_ONLY_MESSAGE = "Unauthorized. Admin access only."


class AdminAccessDenied(BaseAppException):
    """Raised by the admin gate for anonymous and non-admin callers alike."""

    minimal_body = True

    def __init__(self):
        super().__init__(message=ADMIN_ONLY_MESSAGE, status_code=403, error_code="ADMIN_ONLY")
