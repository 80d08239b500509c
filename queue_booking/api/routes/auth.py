import logging
from uuid import uuid4

from fastapi import APIRouter, Query

from queue_booking.api.schemas.auth import (
    LineAuthorizationUrl,
    LineCallbackRequest,
    LineCallbackResponse,
)
from queue_booking.core.config import settings
from queue_booking.core.errors import DependencyError, ValidationError
from queue_booking.services.line_auth_service import (
    exchange_code_for_tokens,
    get_line_authorization_url,
    get_line_profile,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# --- LINE Login ---

@router.get("/line/login", response_model=LineAuthorizationUrl)
async def line_login(state: str | None = Query(None)) -> LineAuthorizationUrl:
    if not settings.line_login_configured:
        raise DependencyError("LINE Login is not configured")
    state = state or uuid4().hex
    return LineAuthorizationUrl(authorization_url=get_line_authorization_url(state), state=state)


@router.post("/line/callback", response_model=LineCallbackResponse)
async def line_callback(body: LineCallbackRequest) -> LineCallbackResponse:
    if not body.code:
        raise ValidationError("Missing code parameter")
    try:
        logger.info("LINE callback: step 1 exchange_code_for_tokens")
        tokens = await exchange_code_for_tokens(body.code)
        access_token = tokens.get("access_token") if tokens else None
        if not access_token:
            raise DependencyError("Failed to authenticate with LINE")
        logger.info("LINE callback: step 2 get_line_profile")
        profile = await get_line_profile(access_token)
        user_id = profile.get("userId") if profile else None
        if not user_id:
            raise DependencyError("Failed to authenticate with LINE")
    except DependencyError:
        raise
    except Exception as e:
        logger.exception("LINE login callback error: %s", e)
        raise DependencyError("Failed to authenticate with LINE") from e
    logger.info("LINE callback: resolved userId=%s", user_id)
    return LineCallbackResponse(user_id=user_id, display_name=profile.get("displayName"))
