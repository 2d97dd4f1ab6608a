"""Server configuration loaded from the environment."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from PORT, HOST and LOG_LEVEL."""

    model_config = SettingsConfigDict(case_sensitive=False, env_file=None)

    port: int = 3000
    host: str = "0.0.0.0"
    log_level: str = "info"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
