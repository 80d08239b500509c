from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from queue_booking.api.schemas.auth import LoginRequest, TokenResponse
from queue_booking.core.db import get_session
from queue_booking.core.errors import AuthError, ValidationError
from queue_booking.services.auth_service import login_admin

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> TokenResponse:
    if not body.username or not body.password:
        raise ValidationError("Missing required fields")
    result = await login_admin(session, body.username, body.password)
    if not result:
        raise AuthError("Invalid credentials")
    _, token, expires_in = result
    return TokenResponse(token=token, expires_in=expires_in)
