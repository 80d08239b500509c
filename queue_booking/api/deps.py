from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from queue_booking.core.db import get_session
from queue_booking.core.errors import AuthError
from queue_booking.core.security import decode_admin_token
from queue_booking.models.admin import Admin
from queue_booking.services.auth_service import get_admin_by_id

security = HTTPBearer(auto_error=False)


async def get_current_admin(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Admin:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise AuthError("No token, authorization denied")
    admin_id = decode_admin_token(credentials.credentials)
    if admin_id is None:
        raise AuthError("Token is not valid")
    admin = await get_admin_by_id(session, admin_id)
    if not admin:
        raise AuthError("Admin not found")
    return admin
