"""
SQLite-backed settings: export directory and vegetation parameter profiles.

Lookup order for a vegetation type: user override -> stored default -> built-in profile.
All functions take an open connection (see db/connection.get_db); writes commit immediately.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from vegepoly.services.profiles import DEFAULT_PROFILES, VegetationParams, default_params

EXPORT_PATH_KEY = "export_path"


class SettingsError(ValueError):
    """Rejected settings value (bad path, bad vegetation type, bad density)."""


def _row_to_params(row: sqlite3.Row) -> VegetationParams:
    return VegetationParams(
        vegetation_type=int(row["vegetation_type"]),
        density=float(row["density"]),
        variation=float(row["variation"]),
        type_value=int(row["type_value"]),
    )


def _fetch_params(conn: sqlite3.Connection, table: str, vegetation_type: int) -> VegetationParams | None:
    row = conn.execute(
        f"select vegetation_type, density, variation, type_value from {table} where vegetation_type = ?",
        (vegetation_type,),
    ).fetchone()
    return _row_to_params(row) if row else None


def get_export_path(conn: sqlite3.Connection, fallback: Path) -> Path:
    row = conn.execute("select value from settings where key = ?", (EXPORT_PATH_KEY,)).fetchone()
    if row is None:
        return fallback
    return Path(row["value"])


def set_export_path(conn: sqlite3.Connection, path: str | Path) -> Path:
    target = Path(path).expanduser()
    if not target.exists():
        raise SettingsError(f"Path does not exist: {target}")
    if not target.is_dir():
        raise SettingsError(f"Path is not a directory: {target}")
    conn.execute(
        "insert or replace into settings (key, value) values (?, ?)",
        (EXPORT_PATH_KEY, str(target)),
    )
    conn.commit()
    return target


def get_default_vegetation_params(conn: sqlite3.Connection, vegetation_type: int) -> VegetationParams | None:
    return _fetch_params(conn, "default_vegetation_params", vegetation_type)


def get_user_vegetation_params(conn: sqlite3.Connection, vegetation_type: int) -> VegetationParams | None:
    return _fetch_params(conn, "user_vegetation_params", vegetation_type)


def get_vegetation_params(conn: sqlite3.Connection, vegetation_type: int) -> VegetationParams:
    """Effective parameters for a type. Never None: falls back to the built-in profile."""
    user = get_user_vegetation_params(conn, vegetation_type)
    if user is not None:
        return user
    stored = get_default_vegetation_params(conn, vegetation_type)
    if stored is not None:
        return stored
    return default_params(vegetation_type)


def set_user_vegetation_params(conn: sqlite3.Connection, params: VegetationParams) -> VegetationParams:
    if params.vegetation_type < 1:
        raise SettingsError(f"Invalid vegetation type: {params.vegetation_type}")
    if not params.density > 0:
        raise SettingsError("Density must be greater than 0")
    if params.variation < 0:
        raise SettingsError("Variation cannot be negative")
    conn.execute(
        "insert or replace into user_vegetation_params "
        "(vegetation_type, density, variation, type_value, updated_at) "
        "values (?, ?, ?, ?, datetime('now'))",
        (params.vegetation_type, params.density, params.variation, params.type_value),
    )
    conn.commit()
    return params


def remove_user_vegetation_params(conn: sqlite3.Connection, vegetation_type: int) -> VegetationParams | None:
    """Delete the override; returns what was removed (None if there was nothing)."""
    existing = get_user_vegetation_params(conn, vegetation_type)
    conn.execute("delete from user_vegetation_params where vegetation_type = ?", (vegetation_type,))
    conn.commit()
    return existing


def reset_user_vegetation_params(conn: sqlite3.Connection) -> int:
    cur = conn.execute("delete from user_vegetation_params")
    conn.commit()
    return cur.rowcount


def get_available_vegetation_types(conn: sqlite3.Connection) -> list[int]:
    rows = conn.execute(
        "select vegetation_type from default_vegetation_params "
        "union select vegetation_type from user_vegetation_params "
        "order by vegetation_type"
    ).fetchall()
    return [int(r[0]) for r in rows]


def has_user_params(conn: sqlite3.Connection, vegetation_type: int) -> bool:
    row = conn.execute(
        "select count(*) from user_vegetation_params where vegetation_type = ?",
        (vegetation_type,),
    ).fetchone()
    return row[0] > 0


def seed_default_profiles(conn: sqlite3.Connection) -> int:
    """Insert built-in profiles missing from default_vegetation_params. Returns rows inserted."""
    inserted = 0
    for params in DEFAULT_PROFILES.values():
        cur = conn.execute(
            "insert or ignore into default_vegetation_params "
            "(vegetation_type, density, variation, type_value) values (?, ?, ?, ?)",
            (params.vegetation_type, params.density, params.variation, params.type_value),
        )
        inserted += cur.rowcount
    conn.commit()
    return inserted
