# FILE: iep_backend/config.py
"""
Configuration management for the IEP Hero memory backend
Loads from environment variables with validation
"""
import os
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    # Backend server
    backend_host: str = Field(default="0.0.0.0", alias="BACKEND_HOST")
    backend_port: int = Field(default=5000, alias="BACKEND_PORT")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Data paths
    data_dir: str = Field(default="./data", alias="DATA_DIR")
    store_dir: str = Field(default="./data/store", alias="STORE_DIR")
    store_type: str = Field(default="file", alias="STORE_TYPE")

    # Duplicate suppression
    duplicate_window_seconds: float = Field(
        default=60.0,
        alias="DUPLICATE_WINDOW_SECONDS",
        description="Interval within which the same question from the same user "
                    "is not shared again."
    )

    # Advocate notification (Resend)
    resend_api_key: Optional[str] = Field(default=None, alias="RESEND_API_KEY")
    resend_api_url: str = Field(default="https://api.resend.com/emails", alias="RESEND_API_URL")
    resend_from_address: str = Field(
        default="My IEP Hero <noreply@iephero.com>",
        alias="RESEND_FROM_ADDRESS"
    )
    notify_timeout: float = Field(default=10.0, alias="NOTIFY_TIMEOUT")

    # Demo data
    seed_demo_data: bool = Field(default=False, alias="SEED_DEMO_DATA")
    demo_user_id: str = Field(default="demo-parent", alias="DEMO_USER_ID")

    # Security
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_rpm: int = Field(default=60, alias="RATE_LIMIT_RPM")
    body_size_limit_mb: int = Field(default=5, alias="BODY_SIZE_LIMIT_MB")

    # CORS
    cors_origins: List[str] = Field(default=["http://localhost:5173"], alias="CORS_ORIGINS")

    # Validators
    @field_validator("store_type")
    @classmethod
    def validate_store_type(cls, v):
        if v not in ["file"]:
            raise ValueError("store_type must be 'file'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v

    @field_validator("duplicate_window_seconds")
    @classmethod
    def validate_duplicate_window(cls, v):
        if v <= 0:
            raise ValueError("duplicate_window_seconds must be positive")
        return v

    @field_validator("rate_limit_rpm")
    @classmethod
    def validate_rate_limit_rpm(cls, v):
        if v < 1:
            raise ValueError("rate_limit_rpm must be at least 1")
        return v

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Ensure directories exist
        for dir_path in [self.data_dir, self.store_dir]:
            os.makedirs(dir_path, exist_ok=True)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create singleton settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings():
    """Reload settings (useful for testing)"""
    global _settings
    _settings = None
    return get_settings()
