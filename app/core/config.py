# python
# app/core/config.py
"""Configuration settings for the chat history service.

Uses Pydantic BaseSettings for environment variable management.
"""
import os
import secrets
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class StoreBackendEnum(str, Enum):
    sql = "sql"
    memory = "memory"


# Keys the chat front end needs before it can talk to the model API
REQUIRED_API_KEYS = ["OPENAI_API_KEY"]


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="AI Chatbot History API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Security Settings =====
    secret_key: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        description="Secret key for session token verification",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")

    # ===== Document Store Settings =====
    store_backend: StoreBackendEnum = Field(
        default=StoreBackendEnum.sql, description="Document store backend"
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./chat_history.db",
        description="Database connection URL for the SQL document store",
    )
    test_database_url: str | None = Field(default=None, description="Test database URL")
    store_request_timeout: float = Field(
        default=10.0, description="Timeout for a single store call in seconds"
    )
    store_max_retry_attempts: int = Field(
        default=3, description="Attempts for transient store failures"
    )
    store_retry_min_wait: float = Field(default=0.5, description="Minimum retry backoff")
    store_retry_max_wait: float = Field(default=4.0, description="Maximum retry backoff")

    # ===== Chat Cache Settings =====
    chat_cache_max_entries: int = Field(
        default=500, description="Maximum entries held by the chat entity cache"
    )
    chat_page_size: int = Field(
        default=30, description="Number of recent chats fetched per user listing"
    )

    # ===== AI Service =====
    openai_api_key: str | None = Field(default=None, description="Model API key")

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_ai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def effective_database_url(self) -> str:
        if os.getenv("TESTING") == "true" and self.test_database_url:
            return self.test_database_url
        return self.database_url

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("chat_cache_max_entries")
    @classmethod
    def validate_cache_size(cls, v):
        if v < 1:
            raise ValueError("Chat cache must hold at least one entry")
        return v

    @field_validator("chat_page_size")
    @classmethod
    def validate_page_size(cls, v):
        if not 1 <= v <= 100:
            raise ValueError("Chat page size must be between 1 and 100")
        return v

    @field_validator("store_request_timeout")
    @classmethod
    def validate_store_timeout(cls, v):
        if v <= 0:
            raise ValueError("Store request timeout must be positive")
        return v

    @model_validator(mode="after")
    def check_retry_window(self):
        if self.store_retry_min_wait > self.store_retry_max_wait:
            raise ValueError("store_retry_min_wait cannot exceed store_retry_max_wait")
        return self


settings = Settings()


class ConfigValidator:
    @staticmethod
    def get_missing_keys() -> list[str]:
        return [key for key in REQUIRED_API_KEYS if not os.getenv(key) and not _setting_for(key)]

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "ai_enabled": settings.has_ai_enabled,
            "store_backend": settings.store_backend,
            "cache_max_entries": settings.chat_cache_max_entries,
            "page_size": settings.chat_page_size,
            "environment": settings.environment,
        }


def _setting_for(key: str) -> str | None:
    return getattr(settings, key.lower(), None)


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "missing_keys": ConfigValidator.get_missing_keys(),
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
    "StoreBackendEnum",
    "REQUIRED_API_KEYS",
]
