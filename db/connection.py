from __future__ import annotations

import sqlite3
from typing import Optional

from config.settings import Settings, get_settings
from db import schema


DEFAULT_BUSY_TIMEOUT = 5.0


def get_connection(db_path: str, timeout: Optional[float] = DEFAULT_BUSY_TIMEOUT) -> sqlite3.Connection:
    """Open a SQLite connection for the directory database.

    Writers block each other; ``timeout`` bounds how long one waits for the
    write lock before ``sqlite3.OperationalError`` is raised. The contact
    ledger turns that into a retryable "unavailable" error.

    ``check_same_thread`` is off so a connection opened by a server thread may
    be handed to workers, but each connection must still be used by one thread
    at a time.
    """
    conn = sqlite3.connect(
        db_path,
        timeout=DEFAULT_BUSY_TIMEOUT if timeout is None else timeout,
        check_same_thread=False,
    )
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    # Account and profile deletion cascade to the ledger
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


def open_directory(db_path: Optional[str] = None, settings: Optional[Settings] = None) -> sqlite3.Connection:
    """Connect using configured path and busy timeout, then ensure the schema exists."""
    settings = settings or get_settings()
    conn = get_connection(db_path or settings.db_path, timeout=settings.ledger_timeout_seconds)
    schema.bootstrap(conn)
    return conn
