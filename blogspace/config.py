import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Fallbacks for a local development database
DB_DEFAULTS = {
    "DB_HOST": "localhost",
    "DB_PORT": 5432,
    "DB_USERNAME": "postgres",
    "DB_DATABASE": "blogspace",
    "DB_SCHEMA": "public",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str | None = None
    DB_HOST: str | None = None
    DB_PORT: int | None = None
    DB_USERNAME: str | None = None
    DB_PASSWORD: str = ""
    DB_DATABASE: str | None = None
    DB_SCHEMA: str | None = None

    # Connection pool
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 15
    DB_POOL_RECYCLE: int = 1800
    DB_POOL_TIMEOUT: int = 10
    DB_STATEMENT_TIMEOUT_MS: int = 5000
    DB_HEALTH_TIMEOUT: int = 1

    # Session tokens
    JWT_SECRET: str = Field(min_length=32)
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24

    # Session cookie
    COOKIE_SECURE: bool = True
    COOKIE_SAMESITE: str = "lax"

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    def model_post_init(self, __context) -> None:
        if self.DATABASE_URL:
            return
        for key, fallback in DB_DEFAULTS.items():
            if getattr(self, key) is None:
                logger.warning("Missing env: %s, using default: %s", key, fallback)
                setattr(self, key, fallback)

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.DB_USERNAME}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_DATABASE}"
        )

    @property
    def token_max_age(self) -> int:
        return self.JWT_EXPIRE_HOURS * 3600


@lru_cache()
def get_settings() -> Settings:
    return Settings()
