# backend/settings.py

from __future__ import annotations

import os
from functools import lru_cache
from typing import List

from pydantic import BaseModel, field_validator, model_validator

ENV_PREFIX = "DHONDT_"


class Settings(BaseModel):
    """Runtime settings for the API. Every field can be set from a DHONDT_* env var."""
    # Bounds of the seat slider in the web UI (the allocation itself has no limit)
    max_seats: int = 60
    default_seats: int = 16
    # Shown in grid cells that have no party yet
    seat_placeholder: str = "·"
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @field_validator("max_seats", "default_seats")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be non-negative")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _default_within_bounds(self) -> "Settings":
        if self.default_seats > self.max_seats:
            raise ValueError("default_seats cannot exceed max_seats")
        return self


def load_settings(environ: dict | None = None) -> Settings:
    """Build Settings from the environment, ignoring unset or empty variables."""
    env = os.environ if environ is None else environ
    values = {}
    for field in Settings.model_fields:
        raw = (env.get(ENV_PREFIX + field.upper()) or "").strip()
        if not raw:
            continue
        if field == "cors_origins":
            values[field] = [origin.strip() for origin in raw.split(",") if origin.strip()]
        else:
            values[field] = raw
    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
