"""Tests for built-in profiles and environment configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from vegepoly.config import load_app_settings
from vegepoly.db.connection import get_db_path
from vegepoly.services.profiles import (
    BUFFER_ZONES,
    BUSHES,
    TREES,
    default_params,
    params_to_config,
    vegetation_type_name,
)

_ENV_VARS = [
    "DATABASE_URL",
    "EXPORT_DIR",
    "SAMPLER_MAX_SEED_ATTEMPTS",
    "SAMPLER_MAX_ATTEMPTS_PER_POINT",
    "SAMPLER_SEED",
    "STRICT_VARIATION",
    "LOG_LEVEL",
    "PREVIEW_SIZE_PX",
]


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_builtin_profiles() -> None:
    assert (default_params(TREES).density, default_params(TREES).type_value) == (28.0, 10)
    assert (default_params(BUSHES).density, default_params(BUSHES).variation) == (5.0, 0.5)
    assert (default_params(BUFFER_ZONES).density, default_params(BUFFER_ZONES).type_value) == (3.0, 30)
    assert vegetation_type_name(BUFFER_ZONES) == "Buffer zones"
    assert vegetation_type_name(42) == "Items"


def test_unknown_type_uses_generic_fallback() -> None:
    params = default_params(8)
    assert params.vegetation_type == 8
    assert (params.density, params.variation, params.type_value) == (5.0, 1.0, 10)
    assert default_params(TREES).vegetation_type == TREES


def test_params_to_config_maps_density_to_min_distance() -> None:
    config = params_to_config(default_params(BUSHES), max_seed_attempts=10, strict_variation=True)
    assert config.min_distance == 5.0
    assert config.variation == 0.5
    assert config.type_value == 20
    assert config.max_seed_attempts == 10
    assert config.strict_variation


def test_defaults_without_env(clean_env: pytest.MonkeyPatch) -> None:
    settings = load_app_settings()
    assert settings.database_url == "sqlite:///./vegepoly.db"
    assert settings.max_seed_attempts == 100
    assert settings.max_attempts_per_point == 30
    assert settings.sampler_seed is None
    assert not settings.strict_variation
    assert settings.log_level == "INFO"
    assert settings.preview_size_px == 600
    assert settings.export_dir.name == "Downloads"


def test_env_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("EXPORT_DIR", str(tmp_path))
    clean_env.setenv("SAMPLER_MAX_ATTEMPTS_PER_POINT", "12")
    clean_env.setenv("SAMPLER_SEED", "99")
    clean_env.setenv("STRICT_VARIATION", "yes")
    clean_env.setenv("LOG_LEVEL", "debug")
    settings = load_app_settings()
    assert settings.export_dir == tmp_path
    assert settings.max_attempts_per_point == 12
    assert settings.sampler_seed == 99
    assert settings.strict_variation
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["abc", "0", "-4"])
def test_invalid_numbers_fall_back(clean_env: pytest.MonkeyPatch, raw: str) -> None:
    clean_env.setenv("SAMPLER_MAX_SEED_ATTEMPTS", raw)
    clean_env.setenv("SAMPLER_SEED", "not-a-number")
    settings = load_app_settings()
    assert settings.max_seed_attempts == 100
    assert settings.sampler_seed is None


def test_invalid_log_level_falls_back(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("LOG_LEVEL", "verbose")
    assert load_app_settings().log_level == "INFO"


def test_db_path_follows_database_url(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    assert get_db_path() == "./vegepoly.db"
    db_file = tmp_path / "custom.db"
    clean_env.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    assert load_app_settings().database_url == f"sqlite:///{db_file}"
    assert get_db_path() == str(db_file)
