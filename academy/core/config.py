"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "Academy Sessions: scheduling and player performance."
    VERSION: str = "0.1.0"
    AUTHORS: List[str] = ["Academy Portal Team"]
    PROJECT_URL: str = "https://github.com/academy-portal/academy-sessions"

    DEBUG: bool = False

    # Database
    # A full URL wins over the postgres parts (tests and local runs use sqlite).
    DATABASE_URL_OVERRIDE: Optional[str] = None
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_DBNAME: str = "academy"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # Session list client
    SESSIONS_API_URL: str = "http://localhost:8000"
    SESSION_PAGE_SIZE: int = 50
    FETCH_MAX_ATTEMPTS: int = 3
    FETCH_BACKOFF_SECONDS: float = 1.0
    POLL_INTERVAL_SECONDS: float = 30.0
    SESSION_CACHE_TTL_SECONDS: float = 300.0
    HTTP_TIMEOUT_SECONDS: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}"
                f":{self.DATABASE_PORT}/{self.DATABASE_DBNAME}")


# Global settings instance
settings = Settings()
