import logging
from urllib.parse import urlencode

import httpx

from queue_booking.core.config import settings

logger = logging.getLogger(__name__)

LINE_AUTHORIZE_URL = "https://access.line.me/oauth2/v2.1/authorize"
LINE_TOKEN_URL = "https://api.line.me/oauth2/v2.1/token"
LINE_PROFILE_URL = "https://api.line.me/v2/profile"


def get_line_authorization_url(state: str) -> str:
    params = {
        "response_type": "code",
        "client_id": settings.line_channel_id,
        "redirect_uri": settings.line_redirect_uri,
        "state": state,
        "scope": "profile openid",
    }
    return f"{LINE_AUTHORIZE_URL}?{urlencode(params)}"


async def exchange_code_for_tokens(code: str) -> dict | None:
    if not settings.line_login_configured:
        logger.warning("LINE Login not configured (LINE_CHANNEL_ID, LINE_CHANNEL_SECRET, LINE_REDIRECT_URI)")
        return None
    async with httpx.AsyncClient() as client:
        resp = await client.post(
            LINE_TOKEN_URL,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": settings.line_redirect_uri,
                "client_id": settings.line_channel_id,
                "client_secret": settings.line_channel_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if resp.status_code != 200:
            logger.warning(
                "LINE token exchange failed: status=%s body=%s redirect_uri=%s",
                resp.status_code,
                resp.text[:500],
                settings.line_redirect_uri,
            )
            return None
        return resp.json()


async def get_line_profile(access_token: str) -> dict | None:
    async with httpx.AsyncClient() as client:
        resp = await client.get(
            LINE_PROFILE_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if resp.status_code != 200:
            logger.warning("LINE profile fetch failed: status=%s", resp.status_code)
            return None
        return resp.json()
