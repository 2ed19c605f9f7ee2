"""
Application configuration from environment variables.
Loads .env from the backend directory so DB credentials and SECRET_KEY are found regardless of cwd.
Built once per process (get_settings) or passed explicitly to create_app; handlers read it from app.state.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

DEFAULT_SECRET_KEY = "change-me-in-production"

# .env next to backend/ (parent of gradestats/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"


class Settings(BaseSettings):
    """Load and validate config from env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,  # DB_PORT= in .env means unset
    )

    # Database: DATABASE_URL wins; otherwise built from DB_* parts (MariaDB); otherwise local sqlite
    database_url: str = ""
    db_dialect: str = "mysql+pymysql"
    db_host: str = ""
    db_port: int | None = None
    db_name: str = ""
    db_user: str = ""
    db_password: str = ""

    # HTTP server (python -m gradestats)
    host: str = "0.0.0.0"
    port: int = 3000

    # Environment: set ENV=production in production; used to enforce SECRET_KEY.
    env: str = ""

    # JWT: raw token in the `authorization` header, 1 hour lifetime
    secret_key: str = DEFAULT_SECRET_KEY
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = Field(default=60, gt=0)

    # bcrypt cost factor (2^rounds iterations)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # When true, /users routes check role (admin) or self before acting
    restrict_user_admin: bool = False
    # Append internal error text to 500 responses
    expose_errors: bool = True

    # CORS: comma-separated origins
    cors_origins: str = "http://localhost:3000"

    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @property
    def sqlalchemy_url(self) -> str | URL:
        """URL handed to create_engine."""
        if self.database_url.strip():
            return self.database_url.strip()
        if self.db_host.strip():
            return URL.create(
                self.db_dialect,
                username=self.db_user or None,
                password=self.db_password or None,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name or None,
            )
        return "sqlite:///./gradestats.db"

    @property
    def is_production(self) -> bool:
        return (self.env or "").strip().lower() == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings; constructed on first call."""
    return Settings()
