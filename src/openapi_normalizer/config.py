"""Runtime settings, read from OPENAPI_NORMALIZER_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_DEPTH = 128


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="OPENAPI_NORMALIZER_", extra="ignore")

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    strict_references: bool = False
    output_format: Literal["auto", "json", "yaml"] = "auto"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
