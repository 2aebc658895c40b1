from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VCOIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Origins allowed to call /api/* from a browser.
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    # Used by the stateless calculation endpoint when the body has no timezone.
    default_timezone: str = "America/Argentina/Buenos_Aires"
    use_sample_data: bool = True
    # Longest accrual or projection walk a single request may run.
    max_window_days: int = Field(default=3660, gt=0)
    log_level: str = "INFO"
    version: str = "1.0.0"


@lru_cache
def get_settings() -> Settings:
    return Settings()
