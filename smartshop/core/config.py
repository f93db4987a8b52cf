"""
Core configuration module using Pydantic Settings.
Supports environment variables and .env files.
"""
from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from smartshop.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="allow"
    )

    # Application
    app_name: str = Field(default="SmartShop POS", alias="APP_NAME")
    app_version: str = Field(default="3.5.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Local durable store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/smartshop.db",
        alias="DATABASE_URL"
    )
    db_echo: bool = Field(default=False, alias="DB_ECHO")

    # Remote table store (PostgREST / Supabase)
    remote_store_url: Optional[str] = Field(default=None, alias="REMOTE_STORE_URL")
    remote_store_key: Optional[str] = Field(default=None, alias="REMOTE_STORE_KEY")
    remote_timeout_seconds: float = Field(default=10.0, alias="REMOTE_TIMEOUT_SECONDS")

    # Background sync
    sync_queue_size: int = Field(default=100, alias="SYNC_QUEUE_SIZE")
    sync_max_retries: int = Field(default=5, alias="SYNC_MAX_RETRIES")
    sync_backoff_base_seconds: float = Field(default=1.0, alias="SYNC_BACKOFF_BASE_SECONDS")
    sync_backoff_max_seconds: float = Field(default=60.0, alias="SYNC_BACKOFF_MAX_SECONDS")

    # Image recognition (Gemini)
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-flash-latest", alias="GEMINI_MODEL")
    recognition_confidence_threshold: float = Field(
        default=80.0,
        alias="RECOGNITION_CONFIDENCE_THRESHOLD"
    )
    recognition_max_image_side: int = Field(default=1024, alias="RECOGNITION_MAX_IMAGE_SIDE")
    max_upload_size: int = Field(default=10 * 1024 * 1024, alias="MAX_UPLOAD_SIZE")  # 10MB

    # Backup
    backup_version: str = Field(default="3.5", alias="BACKUP_VERSION")

    # Security
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        alias="CORS_ORIGINS"
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: str = Field(default="./logs/app.log", alias="LOG_FILE")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    def missing_credentials(self) -> list[str]:
        """Names of required credential variables that are not set."""
        required = {
            "REMOTE_STORE_URL": self.remote_store_url,
            "REMOTE_STORE_KEY": self.remote_store_key,
            "GEMINI_API_KEY": self.gemini_api_key,
        }
        return [name for name, value in required.items() if not value]

    def ensure_credentials(self) -> None:
        """Fail fast when the remote store or recognition credentials are absent."""
        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(missing)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
