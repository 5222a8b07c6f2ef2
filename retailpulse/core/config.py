from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic import field_validator


def _parse_bool(v):
    if isinstance(v, str):
        return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
    return bool(v)


class Settings(BaseSettings):
    # Database settings
    POSTGRES_USER: str = 'retailpulse_user'
    POSTGRES_PASSWORD: str = 'retailpulse_pass'
    POSTGRES_DB: str = 'retailpulse_db'
    POSTGRES_HOST: str = 'postgres'
    POSTGRES_PORT: int = 5432

    # Redis settings (Celery broker and result backend)
    REDIS_HOST: str = 'redis'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    # JWT settings
    APP_SECRET_STRING: str = 'your-super-secret-key-here-change-in-production-2024'
    ALGORITHM: str = 'HS256'

    # Sales reports
    REPORT_TOP_N: int = 10
    REPORT_TIMEZONE: str = 'UTC'  # Business timezone for the daily revenue series
    REPORT_CACHE_MAX_ENTRIES: int = 128  # 0 disables the statistics cache
    REPORT_ALLOW_PARTIAL_RESULTS: bool = False
    REPORT_MAX_PAGE_SIZE: int = 500

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    @property
    def async_database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def redis_url(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def report_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.REPORT_TIMEZONE)

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", mode="before")
    @classmethod
    def parse_debug(cls, v):
        return _parse_bool(v)

    @field_validator("REPORT_ALLOW_PARTIAL_RESULTS", mode="before")
    @classmethod
    def parse_allow_partial(cls, v):
        return _parse_bool(v)

    @field_validator("REPORT_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v):
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone '{v}'")
        return v

    @field_validator("REPORT_TOP_N")
    @classmethod
    def validate_top_n(cls, v):
        if v < 1:
            raise ValueError("REPORT_TOP_N must be at least 1")
        return v

settings = Settings()
