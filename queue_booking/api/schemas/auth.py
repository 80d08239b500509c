from pydantic import BaseModel

from queue_booking.api.schemas.booking import CamelModel


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class LineCallbackRequest(BaseModel):
    code: str | None = None
    state: str | None = None


class LineCallbackResponse(CamelModel):
    user_id: str
    display_name: str | None = None


class LineAuthorizationUrl(CamelModel):
    authorization_url: str
    state: str
