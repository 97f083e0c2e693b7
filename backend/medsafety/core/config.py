"""Engine configuration using pydantic-settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Medication Safety Engine"
    debug: bool = False
    log_level: str = "INFO"

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Cache
    cache_backend: Literal["redis", "memory"] = "redis"
    cache_key_prefix: str = "medsafety:"
    cache_ttl_seconds: int = 86400  # 24 hours

    # Safety evaluation
    adverse_event_rate_threshold: float = 10.0  # percent
    top_medications_limit: int = 10


settings = Settings()
