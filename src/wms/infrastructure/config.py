"""Runtime configuration via pydantic-settings.

Values come from ``WMS_*`` environment variables or a local ``.env``.
Only the composition root reads settings; domain services receive the
individual values through their constructors.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="WMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Business calendar (KST)
    business_utc_offset_hours: int = Field(default=9, ge=-12, le=14)

    # Order numbering
    order_number_prefix: str = "SO"
    order_number_sequence_width: int = Field(default=3, ge=1)
    default_tenant_id: str = "default"

    # Queries
    max_list_range_days: int = Field(default=365, ge=1)

    # Drafts
    default_shipping_mode: str = "immediate"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
