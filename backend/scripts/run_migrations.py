"""
Applies SQLite migrations in file-name order, then seeds the built-in vegetation profiles.
Requires: DATABASE_URL or the file ./vegepoly.db (path to the SQLite file).
Creates the schema_version table if it does not exist.
"""
import sqlite3
import sys
from pathlib import Path

# backend/scripts -> backend
BACKEND = Path(__file__).resolve().parent.parent
MIGRATIONS_DIR = BACKEND / "migrations"
sys.path.insert(0, str(BACKEND))

from vegepoly.db.connection import get_db_path


def run_migrations(db_path: str, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply pending *.sql files; returns the names applied in this call."""
    conn = sqlite3.connect(db_path)
    applied_now: list[str] = []
    try:
        conn.execute("""
            create table if not exists schema_version (
                migration_name text primary key,
                applied_at text not null default (datetime('now'))
            )
        """)
        conn.commit()

        applied = {row[0] for row in conn.execute("select migration_name from schema_version").fetchall()}
        for path in sorted(migrations_dir.glob("*.sql")):
            name = path.name
            if name in applied:
                continue
            conn.executescript(path.read_text(encoding="utf-8"))
            conn.execute("insert into schema_version (migration_name) values (?)", (name,))
            conn.commit()
            applied_now.append(name)
            print(f"Applied: {name}")
    finally:
        conn.close()
    return applied_now


def main() -> None:
    db_path = get_db_path()
    run_migrations(db_path)
    from scripts.seed_default_profiles import seed_profiles
    seed_profiles(db_path)
    print("Migrations and seed done.")


if __name__ == "__main__":
    main()
