import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from queue_booking.core.config import settings
from queue_booking.core.security import (
    create_admin_token,
    hash_password,
    verify_password,
)
from queue_booking.models.admin import Admin

logger = logging.getLogger(__name__)


async def get_admin_by_username(session: AsyncSession, username: str) -> Admin | None:
    result = await session.execute(select(Admin).where(Admin.username == username))
    return result.scalar_one_or_none()


async def get_admin_by_id(session: AsyncSession, admin_id: int) -> Admin | None:
    return await session.get(Admin, admin_id)


async def create_admin(session: AsyncSession, username: str, password: str) -> Admin:
    admin = Admin(username=username, hashed_password=hash_password(password))
    session.add(admin)
    await session.flush()
    await session.refresh(admin)
    return admin


async def ensure_default_admin(session: AsyncSession, username: str, password: str) -> Admin | None:
    """Create the bootstrap admin unless it already exists. Safe to run on every startup."""
    if not username or not password:
        logger.warning("Default admin bootstrap skipped: username or password not configured")
        return None
    existing = await get_admin_by_username(session, username)
    if existing:
        return existing
    admin = await create_admin(session, username, password)
    logger.warning("Default admin created: username=%s. Change its password.", username)
    return admin


def make_admin_token(admin_id: int) -> tuple[str, int]:
    token = create_admin_token(admin_id)
    expires_in = settings.access_token_expire_minutes * 60
    return token, expires_in


async def login_admin(
    session: AsyncSession, username: str, password: str
) -> tuple[Admin, str, int] | None:
    admin = await get_admin_by_username(session, username)
    if not admin:
        return None
    if not verify_password(password, admin.hashed_password):
        return None
    token, expires_in = make_admin_token(admin.id)
    return admin, token, expires_in
