# composer/config.py
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEZONES = (
    "UTC",
    "America/New_York",
    "America/Los_Angeles",
    "Europe/London",
    "Europe/Berlin",
    "Asia/Singapore",
    "Australia/Sydney",
)


class Settings(BaseSettings):
    min_prompt_length: int = Field(default=10, ge=1)
    supported_timezones: Tuple[str, ...] = DEFAULT_TIMEZONES
    default_timezone: str = "UTC"
    default_workflow_name: str = "Natural Language n8n Flow"

    # Alternate catalog file; the bundled nodes.yaml is used when unset
    catalog_path: Optional[Path] = None

    layout_origin_x: int = 250
    layout_origin_y: int = 300
    layout_step_x: int = 220
    layout_branch_step_y: int = 160

    json_indent: int = 2
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="COMPOSER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def is_supported_timezone(self, timezone: str) -> bool:
        return timezone in self.supported_timezones


@lru_cache()
def get_settings() -> Settings:
    return Settings()
