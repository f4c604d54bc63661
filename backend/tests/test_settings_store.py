"""Tests for the SQLite settings store (schema from migrations/)."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from vegepoly.services import settings_store
from vegepoly.services.profiles import BUSHES, DEFAULT_PROFILES, TREES, VegetationParams
from vegepoly.services.settings_store import SettingsError

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def _create_schema(conn: sqlite3.Connection) -> None:
    for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
        conn.executescript(path.read_text(encoding="utf-8"))
    conn.commit()


@pytest.fixture()
def db():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    _create_schema(conn)
    settings_store.seed_default_profiles(conn)
    try:
        yield conn
    finally:
        conn.close()


def test_seed_is_idempotent(db: sqlite3.Connection) -> None:
    assert settings_store.seed_default_profiles(db) == 0
    assert settings_store.get_available_vegetation_types(db) == [1, 2, 3]


def test_effective_params_fall_back_to_stored_default(db: sqlite3.Connection) -> None:
    assert settings_store.get_vegetation_params(db, TREES) == DEFAULT_PROFILES[TREES]
    assert not settings_store.has_user_params(db, TREES)


def test_unknown_type_falls_back_to_builtin(db: sqlite3.Connection) -> None:
    params = settings_store.get_vegetation_params(db, 9)
    assert params.vegetation_type == 9
    assert params == VegetationParams(vegetation_type=9, density=5.0, variation=1.0, type_value=10)
    assert settings_store.get_default_vegetation_params(db, 9) is None


def test_user_override_wins_and_can_be_removed(db: sqlite3.Connection) -> None:
    custom = VegetationParams(vegetation_type=BUSHES, density=7.5, variation=0.2, type_value=21)
    settings_store.set_user_vegetation_params(db, custom)
    assert settings_store.has_user_params(db, BUSHES)
    assert settings_store.get_vegetation_params(db, BUSHES) == custom
    assert settings_store.get_default_vegetation_params(db, BUSHES) == DEFAULT_PROFILES[BUSHES]

    assert settings_store.remove_user_vegetation_params(db, BUSHES) == custom
    assert settings_store.remove_user_vegetation_params(db, BUSHES) is None
    assert settings_store.get_vegetation_params(db, BUSHES) == DEFAULT_PROFILES[BUSHES]


def test_user_only_type_is_listed(db: sqlite3.Connection) -> None:
    settings_store.set_user_vegetation_params(db, VegetationParams(7, 2.0, 0.0, 70))
    assert settings_store.get_available_vegetation_types(db) == [1, 2, 3, 7]


def test_reset_removes_all_overrides(db: sqlite3.Connection) -> None:
    settings_store.set_user_vegetation_params(db, VegetationParams(1, 2.0, 0.0, 11))
    settings_store.set_user_vegetation_params(db, VegetationParams(2, 2.0, 0.0, 22))
    assert settings_store.reset_user_vegetation_params(db) == 2
    assert not settings_store.has_user_params(db, 1)


@pytest.mark.parametrize(
    "params",
    [
        VegetationParams(0, 5.0, 0.0, 1),
        VegetationParams(1, 0.0, 0.0, 1),
        VegetationParams(1, -3.0, 0.0, 1),
        VegetationParams(1, 5.0, -1.0, 1),
    ],
)
def test_invalid_user_params_rejected(db: sqlite3.Connection, params: VegetationParams) -> None:
    with pytest.raises(SettingsError):
        settings_store.set_user_vegetation_params(db, params)


def test_export_path_roundtrip(db: sqlite3.Connection, tmp_path: Path) -> None:
    fallback = tmp_path / "fallback"
    assert settings_store.get_export_path(db, fallback) == fallback
    settings_store.set_export_path(db, tmp_path)
    assert settings_store.get_export_path(db, fallback) == tmp_path


def test_export_path_must_be_existing_directory(db: sqlite3.Connection, tmp_path: Path) -> None:
    with pytest.raises(SettingsError, match="does not exist"):
        settings_store.set_export_path(db, tmp_path / "missing")
    file_path = tmp_path / "file.txt"
    file_path.write_text("x", encoding="utf-8")
    with pytest.raises(SettingsError, match="not a directory"):
        settings_store.set_export_path(db, file_path)
