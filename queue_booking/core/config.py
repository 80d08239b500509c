from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    # create_all on startup; prefer Alembic outside local SQLite setups
    auto_create_tables: bool = False

    # Admin session tokens
    secret_key: str
    access_token_expire_minutes: int = 60
    algorithm: str = "HS256"

    # Bootstrap admin, created once if missing. Empty password disables it.
    default_admin_username: str = "admin"
    default_admin_password: str = "admin123"

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Bookable time slots, as labels
    booking_time_slots: list[str] = ["10:00", "11:00", "13:00"]

    # LINE Login
    line_channel_id: str = ""
    line_channel_secret: str = ""
    line_redirect_uri: str = ""

    # LINE Messaging API (admin push notifications). Leave empty to disable.
    line_channel_access_token: str = ""
    line_admin_user_id: str = ""
    notification_timeout_seconds: float = 10.0

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.line_channel_access_token and self.line_admin_user_id)

    @property
    def line_login_configured(self) -> bool:
        return bool(self.line_channel_id and self.line_channel_secret and self.line_redirect_uri)


settings = Settings()
