"""Client configuration loaded from environment variables.

A ``.env`` file in the working directory is read first (missing is fine);
real environment variables win over it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from coursecart.domain.exceptions import ValidationError

_PREFIX = "COURSECART_"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    """Typed settings for the course cart client."""

    api_base_url: str
    http_timeout: float
    cart_file: Path
    log_level: str
    pulse_seconds: float
    max_duration_weeks: int
    token: str | None
    user_id: str | None
    role: str | None


def _env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(_PREFIX + name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _positive_float(name: str, default: str) -> float:
    raw = _env(name, default)
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValidationError(f"{_PREFIX}{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValidationError(f"{_PREFIX}{name} must be positive, got {raw!r}")
    return value


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True), override=False)

    log_level = (_env("LOG_LEVEL", "WARNING") or "WARNING").upper()
    if log_level not in _LOG_LEVELS:
        raise ValidationError(f"{_PREFIX}LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")

    weeks = _positive_float("MAX_DURATION_WEEKS", "52")

    return Settings(
        api_base_url=(_env("API_BASE_URL", "http://localhost:5000") or "").rstrip("/"),
        http_timeout=_positive_float("HTTP_TIMEOUT", "15"),
        cart_file=Path(_env("CART_FILE", "~/.coursecart/cart.json")).expanduser(),
        log_level=log_level,
        pulse_seconds=_positive_float("PULSE_SECONDS", "0.6"),
        max_duration_weeks=int(weeks),
        token=_env("TOKEN"),
        user_id=_env("USER_ID"),
        role=_env("ROLE"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
