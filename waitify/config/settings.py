"""Application settings using Pydantic."""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    This uses Pydantic to:
    1. Load values from .env file
    2. Validate data types
    3. Provide defaults
    """

    # API Settings
    PROJECT_NAME: str = "Waitify"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Environment & Logging
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Supabase
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None  # anon key
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None  # server-side key, bypasses RLS

    # Edge function that sends SMS / email and resolves customer emails
    NOTIFICATION_FUNCTION: str = "send-notification"
    # Email sends mark the entry notified; SMS sends only do so when this is set
    SMS_MARKS_NOTIFIED: bool = False

    # Floor plan persistence ("redis" or "memory")
    FLOOR_PLAN_STORAGE: str = "redis"
    FLOOR_PLAN_KEY_PREFIX: str = "floorPlan-"
    # Live editors kept in memory before the least recently used is dropped
    FLOOR_PLAN_MAX_SESSIONS: int = 100
    REDIS_URL: str = "redis://localhost:6379"

    # Floor plan editor
    FLOOR_PLAN_GRID_SIZE: int = 20
    FLOOR_PLAN_ZOOM_MIN: float = 0.5
    FLOOR_PLAN_ZOOM_MAX: float = 2.0
    FLOOR_PLAN_ZOOM_STEP: float = 0.1

    # Load environment variables from .env; extra fields are ignored.
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_file_encoding='utf-8',
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Create cached settings instance.
    """
    return Settings()


# Create a single instance for easy importing
settings = get_settings()
