"""Runtime settings read from ``MODEL_MORTGAGE_*`` environment variables or a ``.env`` file."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "MODEL_MORTGAGE_"
_HANDLER_NAME = "model_mortgage"


class Settings(BaseSettings):
    """Branding, export limits and logging for the site."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    brand_name: str = "Model Mortgage"
    nmls: str = ""
    phone: str = ""
    contact_email: str = ""
    max_exports_per_day: int = Field(default=15, ge=1, description="PDF exports allowed per visitor per window")
    export_window_hours: int = Field(default=24, ge=1, description="Rolling export window in hours")
    session_file: str = "session_data.json"
    log_level: str = Field(default="INFO", description="Root logging level")

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the root logger; repeat calls only reset the level."""

    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(h, "name", None) == _HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.name = _HANDLER_NAME
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
