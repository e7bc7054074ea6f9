"""
Configuration Management
Environment-based configuration for the Supabase project and the HTTP service
"""

from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import logging

logger = logging.getLogger(__name__)

MAX_AVATAR_SIZE = 5 * 1024 * 1024


class Settings(BaseSettings):
    """Account service settings, read from the environment and .env"""

    # App config
    app_name: str = "Account Service"
    service_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = "default"
    log_config_path: Optional[str] = None

    # Supabase project (required)
    supabase_url: str
    supabase_anon_key: str

    # Storage and tables
    avatar_bucket: str = "avatars"
    profiles_table: str = "profiles"
    max_avatar_size: int = MAX_AVATAR_SIZE

    # Session cookies
    auth_cookie_name: str = "sb-auth-token"
    cookie_secure: bool = False
    cookie_samesite: str = "lax"
    cookie_max_age: int = 400 * 24 * 60 * 60

    # Profile updates surface the provider's message instead of a generic one
    expose_provider_errors: bool = False

    # CORS
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('supabase_url', 'supabase_anon_key')
    @classmethod
    def validate_required(cls, v: str, info):
        if not v or not v.strip():
            raise ValueError(f"{info.field_name.upper()} must be set")
        return v.strip()

    @field_validator('supabase_url')
    @classmethod
    def validate_supabase_url(cls, v: str):
        if not v.startswith(("http://", "https://")):
            raise ValueError("SUPABASE_URL must be an http(s) URL")
        return v.rstrip("/")

    @field_validator('cookie_samesite')
    @classmethod
    def validate_samesite(cls, v: str):
        v = v.lower()
        if v not in ("lax", "strict", "none"):
            raise ValueError("COOKIE_SAMESITE must be one of lax, strict, none")
        return v

    def log_config(self):
        """Log configuration (without secrets)"""
        logger.info(f"Environment: {self.environment}")
        logger.info(f"Supabase URL: {self.supabase_url}")
        logger.info(f"Avatar bucket: {self.avatar_bucket}, profiles table: {self.profiles_table}")
        logger.info(f"Secure cookies: {self.cookie_secure}")


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment"""
    global _settings
    _settings = None
