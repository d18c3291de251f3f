from functools import lru_cache
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # APP
    APP_NAME: str = "Tango CRM API"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./tango.db"

    # JWT
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_MINUTES: int = 60

    # CORS (comma separated in .env)
    CORS_ORIGINS: Optional[str] = None

    # Revenue growth
    DEFAULT_PRECISION: int = 2
    MAX_TREND_PERIODS: int = 24
    STRICT_CUSTOM_WINDOWS: bool = True

    @field_validator("JWT_SECRET")
    @classmethod
    def _jwt_min_length(cls, v: str) -> str:
        if v is None or len(v) < 32:
            raise ValueError("JWT secret must be at least 32 characters long.")
        return v

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        v = self.CORS_ORIGINS
        if not v:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
