"""
Seed of the built-in vegetation profiles (Trees, Bushes, Buffer zones).
Only missing types are inserted; edited defaults are left alone.
Run after migrations by run_migrations.py.
"""
from pathlib import Path
import sqlite3
import sys

# backend/scripts -> backend
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vegepoly.services.settings_store import seed_default_profiles


def seed_profiles(db_path: str) -> int:
    conn = sqlite3.connect(db_path)
    try:
        inserted = seed_default_profiles(conn)
    finally:
        conn.close()
    print(f"Seeded {inserted} default vegetation profile(s).")
    return inserted


if __name__ == "__main__":
    from vegepoly.db.connection import get_db_path
    seed_profiles(get_db_path())
