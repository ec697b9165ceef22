from functools import lru_cache
from typing import Any, List
import json

from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from a comma separated string or a JSON array"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Application
    APP_NAME: str = "Task Management API"
    ENVIRONMENT: str = "development"

    # Database
    DATABASE_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "taskboard"
    DB_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Auth
    JWT_SECRET: str = "dev-secret-key-change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    REMEMBER_ME_EXPIRE_DAYS: int = 30
    SESSION_COOKIE_NAME: str = "session"
    COOKIE_SECURE: bool = False

    # Comma separated or JSON list
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:5174"

    # Create placeholder admins/students/tasks for dangling references
    # instead of rejecting the write.
    AUTO_PROVISION_REFERENCES: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    @property
    def cors_origins(self) -> List[str]:
        return parse_cors_origins(self.CORS_ORIGINS)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
