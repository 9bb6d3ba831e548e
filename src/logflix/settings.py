# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logflix.defaults import DEFAULT_SPEED, MIN_TICK_MS, SERVER_HOST, SERVER_PORT, SUPPORTED_SPEEDS
from logflix.paths import default_cast_root


class Settings(BaseSettings):
    cast_root: Path = Field(default_factory=default_cast_root)
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"
    host: str = SERVER_HOST
    port: int = SERVER_PORT
    min_tick_ms: float = Field(default=MIN_TICK_MS, gt=0)
    default_speed: float = DEFAULT_SPEED

    model_config = SettingsConfigDict(
        env_prefix="LOGFLIX_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("default_speed")
    @classmethod
    def _speed_supported(cls, value: float) -> float:
        if value not in SUPPORTED_SPEEDS:
            raise ValueError(f"default_speed must be one of {SUPPORTED_SPEEDS}")
        return value
