# app/domains/user/service.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.exceptions.user import EmailAlreadyTakenError, UserNotFoundError
from app.schemas.user import UserCreateRequest, UserUpdateRequest
from app.shared.pagination import PaginationParams, paginate
from models import User

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: int, include_deleted: bool = False) -> Optional[User]:
        """Get a user by ID. Soft-deleted users are hidden unless asked for."""
        stmt = select(User).where(User.id == user_id)
        if not include_deleted:
            stmt = stmt.where(User.active())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str, include_deleted: bool = False) -> Optional[User]:
        """Get a user by email, compared case-insensitively."""
        stmt = select(User).where(func.lower(User.email) == email.lower())
        if not include_deleted:
            stmt = stmt.where(User.active())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(self, user_data: UserCreateRequest) -> User:
        """Create a regular (non-admin) user from validated input."""
        email = str(user_data.email)
        # Soft-deleted accounts still own their email address
        if await self.get_user_by_email(email, include_deleted=True):
            raise EmailAlreadyTakenError()

        user = User().fill({"name": user_data.name, "email": email})
        user.password_hash = hash_password(user_data.password)

        self.db.add(user)
        await self._commit()
        await self.db.refresh(user)
        logger.info("Created user %s", user.id)
        return user

    async def update_user(self, user_id: int, update_data: UserUpdateRequest) -> User:
        """Update allow-listed user fields. Unset fields are left as they are."""
        user = await self.get_user_or_404(user_id)
        changes = update_data.model_dump(exclude_unset=True, exclude_none=True)

        new_email = changes.get("email")
        if new_email is not None:
            new_email = str(new_email)
            if new_email.lower() != user.email.lower():
                if await self.get_user_by_email(new_email, include_deleted=True):
                    raise EmailAlreadyTakenError()
            changes["email"] = new_email

        password = changes.pop("password", None)
        user.fill(changes)
        if password is not None:
            user.password_hash = hash_password(password)

        await self._commit()
        await self.db.refresh(user)
        return user

    async def set_admin_flag(self, user_id: int, is_admin: bool) -> User:
        """Privileged path: the only service method that writes ``is_admin``."""
        user = await self.get_user_or_404(user_id)
        user.is_admin = is_admin
        await self._commit()
        await self.db.refresh(user)
        logger.info("Admin flag for user %s set to %s", user.id, is_admin)
        return user

    async def get_users_list(
        self, pagination: PaginationParams, include_deleted: bool = False
    ) -> Dict[str, Any]:
        """Get paginated list of users ordered by id."""
        stmt = select(User)
        if not include_deleted:
            stmt = stmt.where(User.active())
        stmt = stmt.order_by(User.id)
        return await paginate(self.db, stmt, pagination)

    async def soft_delete_user(self, user_id: int) -> bool:
        """Soft-delete a user. Returns False if the user was already deleted.

        Tasks and memberships of the user are left untouched.
        """
        user = await self.get_user_or_404(user_id, include_deleted=True)
        if not user.soft_delete():
            return False
        await self._commit()
        logger.info("Soft-deleted user %s", user_id)
        return True

    async def restore_user(self, user_id: int) -> User:
        """Clear the soft-delete marker of a user."""
        user = await self.get_user_or_404(user_id, include_deleted=True)
        if user.restore():
            await self._commit()
            await self.db.refresh(user)
        return user

    async def force_delete_user(self, user_id: int) -> None:
        """Remove a user row. Tasks and memberships go with it by cascade."""
        user = await self.get_user_or_404(user_id, include_deleted=True)
        await self.db.delete(user)
        await self._commit()
        logger.info("Hard-deleted user %s", user_id)

    async def get_user_or_404(self, user_id: int, include_deleted: bool = False) -> User:
        user = await self.get_user_by_id(user_id, include_deleted=include_deleted)
        if not user:
            raise UserNotFoundError()
        return user

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("User write failed, transaction rolled back")
            raise
