"""
Application configuration using Pydantic Settings.
"""

from typing import Annotated, List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="allow"
    )

    # Environment
    ENVIRONMENT: str = "development"
    API_V1_PREFIX: str = "/api/v1"

    # Database
    DATABASE_URL: Optional[str] = None  # overrides the DB_* parts when set
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "csrms"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "password"
    DB_POOL_SIZE: int = 20
    DB_POOL_RECYCLE_SECONDS: int = 30
    DB_POOL_TIMEOUT_SECONDS: float = 2.0

    # CORS
    CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Email/Notifications
    EMAIL_HOST: str = "smtp.gmail.com"
    EMAIL_PORT: int = 587
    EMAIL_USER: str = ""
    EMAIL_PASSWORD: str = ""
    EMAIL_SENDER_NAME: str = "Community Service System"
    EMAIL_TIMEOUT_SECONDS: float = 10.0
    STAFF_RECIPIENT_ID: str = "admin"
    STAFF_EMAIL: str = ""

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024

    # Rate limiting
    SUBMIT_RATE_LIMIT: str = "20/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Observability
    LOG_LEVEL: str = "INFO"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v


settings = Settings()
