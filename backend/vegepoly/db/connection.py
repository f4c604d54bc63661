import sqlite3
from collections.abc import Generator

from vegepoly.config import load_app_settings

DEFAULT_DB_PATH = "./vegepoly.db"


def db_path_from_url(url: str) -> str:
    """sqlite:///path -> path; anything unusable falls back to the default file."""
    path = url.replace("sqlite:///", "").strip()
    if not path or path.startswith("sqlite://"):
        path = DEFAULT_DB_PATH
    return path


def get_db_path() -> str:
    """Resolve SQLite DB path from the configured database_url (DATABASE_URL)."""
    return db_path_from_url(load_app_settings().database_url)


def get_db() -> Generator[sqlite3.Connection, None, None]:
    """FastAPI dependency that yields a SQLite connection.
    check_same_thread=False: FastAPI runs Depends in one thread and the endpoint in another (threadpool)."""
    conn = sqlite3.connect(get_db_path(), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
