from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .paths import get_paths


class AppConfig(BaseModel):
    # Environment-derived defaults are validated like explicit values.
    model_config = ConfigDict(validate_default=True)

    state_file: Path = Field(default_factory=lambda: get_paths().state_file)
    log_level: str = Field(default_factory=lambda: os.getenv("PEPERONE_LOG_LEVEL", "WARNING"))
    # Quiet period after a change notification before the tail loop reloads.
    settle_ms: int = Field(default_factory=lambda: os.getenv("PEPERONE_SETTLE_MS", "50"), ge=0)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v!r}")
        return level

    @property
    def settle_seconds(self) -> float:
        return self.settle_ms / 1000.0

    @classmethod
    def load(cls, state_file: Optional[Path] = None, verbose: bool = False) -> "AppConfig":
        """Build the config from the environment, applying CLI overrides."""

        overrides: dict = {}
        if state_file is not None:
            overrides["state_file"] = Path(state_file).expanduser()
        if verbose:
            overrides["log_level"] = "DEBUG"
        return cls(**overrides)


__all__ = ["AppConfig"]
