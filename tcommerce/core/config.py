# tcommerce/core/config.py
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite for local runs)
      - JWT_SECRET (HMAC secret used to sign access tokens)

    Optional:
      - DATABASE_SSLMODE (appended to Postgres URLs, e.g. "require")
      - RATE_LIMIT_STORAGE_URI ("memory://" by default, "redis://..." in prod)
    """

    PROJECT_NAME: str = "TCommerce API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    DATABASE_SSLMODE: str | None = None
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # JWT issuance / verification
    JWT_SECRET: str = Field(min_length=32)
    JWT_ALG: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60 * 24 * 7

    # CORS: comma-separated list, e.g. "http://localhost:3000,https://shop.example"
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    # Rate limiting (slowapi / limits storage)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT: str = "1000/15 minutes"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
