"""Environment-driven settings for the fill engine."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from .forms.fields import MIN_FILLABLE_FIELDS


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass
class Settings:
    """Container for environment-driven settings.

    Values are read when the instance is created, so tests can adjust the
    environment and build a fresh ``Settings()``.
    """

    enabled: bool = field(default_factory=lambda: _env_flag("FILLWISE_ENABLED", default=True))
    # Raise on broken invariants (debug) instead of logging and doing nothing (release).
    strict_contracts: bool = field(default_factory=lambda: _env_flag("FILLWISE_STRICT_CONTRACTS", default=True))
    log_level: str = field(default_factory=lambda: os.getenv("FILLWISE_LOG_LEVEL", "INFO"))
    min_fillable_fields: int = field(
        default_factory=lambda: _env_int("FILLWISE_MIN_FILLABLE_FIELDS", MIN_FILLABLE_FIELDS)
    )
    autofilled_history: int = field(default_factory=lambda: _env_int("FILLWISE_AUTOFILLED_HISTORY", 3))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
