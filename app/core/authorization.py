"""Admin authorization gate.

``ensure_admin`` is the check itself and takes the resolved caller as an
explicit argument. ``require_admin`` wires it into FastAPI: routes that
depend on it never run their body for anonymous or non-admin callers, and
both cases produce the same 403 response.
"""

import logging

from fastapi import Depends

from app.core.dependencies import get_optional_user
from app.exceptions.auth import AdminAccessDenied
from models import User

logger = logging.getLogger(__name__)


def ensure_admin(caller: User | None) -> User:
    """Return ``caller`` if it is an admin, otherwise raise AdminAccessDenied."""
    if caller is None or not caller.is_admin:
        logger.info("Admin-only route refused")
        raise AdminAccessDenied()
    return caller


async def require_admin(caller: User | None = Depends(get_optional_user)) -> User:
    return ensure_admin(caller)
