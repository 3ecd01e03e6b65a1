# app/core/dependencies.py
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import TokenAuthenticator
from app.database import get_db
from app.domains.user.service import UserService
from app.exceptions.base import AuthenticationRequired
from models import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)
auth = TokenAuthenticator()


async def validate_token(
    token: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict | None:
    """Verify the bearer token, if any.

    Returns:
        dict | None: Decoded token payload, or None when there is no usable
        token. Callers decide whether an anonymous request is acceptable.
    """
    if not token or not token.credentials:
        return None

    payload = auth.verify_token(token.credentials)
    if payload is None:
        logger.debug("Rejected bearer token")
    return payload


async def get_optional_user(
    request: Request,
    payload: dict | None = Depends(validate_token),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Resolve the caller from the token payload.

    Returns:
        Optional[User]: The active user named by ``sub``, otherwise None.
    """
    if not payload:
        return None

    user_id = auth.subject_user_id(payload)
    if user_id is None:
        return None

    user = await UserService(db).get_user_by_id(user_id)
    if user is not None:
        request.state.user_id = user.id
    return user


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    """Get the authenticated caller or fail with 401.

    Raises:
        AuthenticationRequired: If no active user could be resolved
    """
    if user is None:
        raise AuthenticationRequired()
    return user
