from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RESUME_", env_file=".env", extra="ignore")

    # Logging
    log_level: str = "INFO"

    # Anonymization
    default_anonymization_preset: Literal["standard", "conservative", "aggressive"] = "standard"
    # A single summary section longer than this is treated as a failed split
    fallback_min_chars: int = 200

    # Uploads
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB


@lru_cache
def get_settings() -> Settings:
    return Settings()
