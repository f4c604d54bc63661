from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from vegepoly.services.sampler import DEFAULT_MAX_ATTEMPTS_PER_POINT, DEFAULT_MAX_SEED_ATTEMPTS

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./vegepoly.db"
DEFAULT_PREVIEW_SIZE_PX = 600


@dataclass(frozen=True)
class AppSettings:
    database_url: str
    export_dir: Path
    max_seed_attempts: int
    max_attempts_per_point: int
    sampler_seed: int | None
    strict_variation: bool
    log_level: str
    preview_size_px: int


def default_export_dir() -> Path:
    """~/Downloads when a home directory is known, else ./Downloads."""
    try:
        return Path.home() / "Downloads"
    except RuntimeError:
        return Path("Downloads")


def load_app_settings() -> AppSettings:
    export_dir_raw = os.environ.get("EXPORT_DIR", "").strip()
    log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        logger.warning("Invalid LOG_LEVEL value: %s. Falling back to 'INFO'.", log_level)
        log_level = "INFO"
    return AppSettings(
        database_url=os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL).strip() or DEFAULT_DATABASE_URL,
        export_dir=Path(export_dir_raw) if export_dir_raw else default_export_dir(),
        max_seed_attempts=_parse_positive_int(
            "SAMPLER_MAX_SEED_ATTEMPTS", DEFAULT_MAX_SEED_ATTEMPTS
        ),
        max_attempts_per_point=_parse_positive_int(
            "SAMPLER_MAX_ATTEMPTS_PER_POINT", DEFAULT_MAX_ATTEMPTS_PER_POINT
        ),
        sampler_seed=_parse_optional_int("SAMPLER_SEED"),
        strict_variation=_parse_bool(os.environ.get("STRICT_VARIATION", "false")),
        log_level=log_level,
        preview_size_px=_parse_positive_int("PREVIEW_SIZE_PX", DEFAULT_PREVIEW_SIZE_PX),
    )


def _parse_positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s value: %s. Falling back to %d.", name, raw, default)
        return default
    if value < 1:
        logger.warning("Invalid %s value: %s. Falling back to %d.", name, raw, default)
        return default
    return value


def _parse_optional_int(name: str) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s value: %s. Ignoring.", name, raw)
        return None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}
