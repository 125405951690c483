"""Settings for the tidal events client.

Values are read from ``ADMIRALTY_``-prefixed environment variables or a
``.env`` file, e.g. ``ADMIRALTY_SUBSCRIPTION_KEY`` and ``ADMIRALTY_STATION_ID``.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from tide_events.consts import ADMIRALTY_API_URL, MAX_DAYS, MAX_EVENTS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ADMIRALTY_", env_file=".env", extra="ignore"
    )

    api_url: str = ADMIRALTY_API_URL
    subscription_key: Optional[SecretStr] = Field(
        default=None, description="Admiralty API subscription key"
    )
    station_id: str = Field(default="0001", description="Default tide station")
    days: int = Field(default=MAX_DAYS, ge=1, le=MAX_DAYS)
    max_events: int = Field(default=MAX_EVENTS, ge=1)
    request_timeout: float = Field(default=10.0, gt=0)
    chunk_size: int = Field(default=512, ge=1)
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
