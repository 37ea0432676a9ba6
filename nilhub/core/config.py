# nilhub/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:/// for local runs)
      - JWT_SECRET (signing secret for session tokens)

    Optional:
      - ENVIRONMENT ("production" hides stack traces in error responses)
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (image storage)
    """

    PROJECT_NAME: str = "NilHub API"
    API_PREFIX: str = "/api"

    # "development" | "production"
    ENVIRONMENT: str = "development"

    DATABASE_URL: str

    # Session tokens
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    JWT_EXPIRE_DAYS: int = 30

    # Supabase Storage (image hosting)
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "nilhub"

    # Upload limits
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    MAX_UPLOAD_FILES: int = 5

    FRONTEND_URL: str = "http://localhost:3000"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def detailed_errors(self) -> bool:
        """Stack traces and error names are only exposed outside production."""
        return self.ENVIRONMENT.strip().lower() != "production"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
