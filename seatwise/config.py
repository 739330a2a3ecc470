"""
Application configuration using Pydantic Settings
"""

from typing import Dict, List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    api_debug: bool = False
    cors_origins: str = "http://localhost:5173"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Discovery
    capacity_strategy: str = "simple"
    max_tables_per_combo: int = 4
    durations_by_party_size: Dict[int, int] = {2: 75, 4: 90, 8: 120}
    default_duration_minutes: int = 90

    # Bookings
    large_group_threshold: int = 8
    approval_ttl_seconds: int = 86_400
    idempotency_ttl_seconds: int = 60
    idempotency_persistent_ttl_seconds: int = 86_400

    # Locking
    lock_timeout_seconds: float = 10.0

    # Waitlist
    waitlist_ttl_seconds: int = 3_600

    # Periodic jobs
    scheduler_enabled: bool = True
    waitlist_check_interval_seconds: int = 300
    approval_check_interval_seconds: int = 3_600
    idempotency_sweep_interval_seconds: int = 30
    lock_sweep_interval_seconds: int = 30

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
