"""Create the initial admin account.

Run with ``python -m app.seeders.admin_user``. The account is taken from the
``ADMIN_NAME``, ``ADMIN_EMAIL`` and ``ADMIN_PASSWORD`` settings and is only
created when no user (deleted or not) already owns that email.
"""

import asyncio
import logging
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, settings
from app.core.logging import configure_logging
from app.core.security import hash_password
from app.domains.user.service import UserService
from models import User

logger = logging.getLogger(__name__)


async def seed_admin(db: AsyncSession, config: Settings) -> User | None:
    """Insert the admin user. Returns None when the email is already taken."""
    if not config.admin_password:
        raise ValueError("ADMIN_PASSWORD must be set to seed the admin user")

    if await UserService(db).get_user_by_email(config.admin_email, include_deleted=True):
        logger.info("Admin user %s already exists, skipping", config.admin_email)
        return None

    admin = User().fill({"name": config.admin_name, "email": config.admin_email})
    admin.password_hash = hash_password(config.admin_password)
    admin.is_admin = True

    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.info("Seeded admin user %s", admin.id)
    return admin


async def run() -> None:
    from app.database import AsyncSessionLocal, engine

    try:
        async with AsyncSessionLocal() as session:
            await seed_admin(session, settings)
    finally:
        await engine.dispose()


def main() -> int:
    configure_logging(settings)
    try:
        asyncio.run(run())
    except ValueError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
