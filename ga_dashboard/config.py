"""
Configuration management for the GA dashboard
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "GA Dashboard"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = "logs"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 3847
    api_workers: int = 1

    # Google Analytics 4
    # Service account JSON pasted into the environment takes precedence over the file
    google_credentials: Optional[str] = None
    ga4_credentials_path: str = "./credentials.json"

    # Property registry (JSON file); the built-in registry is used when unset
    properties_file: Optional[str] = None

    # IANA zone for "most recent Sunday" (system local time when unset)
    timezone: Optional[str] = None

    # Shared-secret gate for the whole dashboard (disabled when empty)
    dashboard_password: Optional[str] = None
    auth_cookie_max_age: int = 86400

    # /api/stats response cache (0 disables)
    stats_cache_ttl: int = 60

    # Partner referral report
    partner_name: str = "SV Solutions USA"
    partner_website: str = "freeshow.app/downloads"
    partner_source: str = "svsolutionsusa"
    partner_property: str = "freeshow"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Unknown IANA zones fail when settings load"""
        if not v:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
