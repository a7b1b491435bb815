"""SQLite connection + schema initialisation."""
from __future__ import annotations
import glob
import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from qa_forum.core.config import DATABASE_PATH, SQLITE_TIMEOUT

logger = logging.getLogger(__name__)

_MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "migrations")


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    # isolation_level=None: transactions are opened explicitly via transaction()
    conn = sqlite3.connect(
        db_path or DATABASE_PATH,
        timeout=SQLITE_TIMEOUT,
        check_same_thread=False,
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


@contextmanager
def transaction(conn: sqlite3.Connection, immediate: bool = True) -> Iterator[sqlite3.Connection]:
    """
    BEGIN IMMEDIATE takes the write lock up front so concurrent writers queue
    on the busy timeout instead of failing mid-transaction. Reads use a
    deferred BEGIN for a consistent snapshot.
    """
    conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK")
        raise
    else:
        conn.execute("COMMIT")


def init_db(db_path: Optional[str] = None) -> None:
    """Run all migration SQL files against the database."""
    path = db_path or DATABASE_PATH
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    conn = get_connection(path)
    try:
        # WAL is persisted in the database file, so it is set once here
        conn.execute("PRAGMA journal_mode=WAL")
        for migration_file in sorted(glob.glob(os.path.join(_MIGRATIONS_DIR, "*.sql"))):
            with open(migration_file, "r", encoding="utf-8") as f:
                sql = f.read()
            conn.executescript(sql)
            logger.debug("Applied migration %s", os.path.basename(migration_file))
    finally:
        conn.close()
    logger.info("Database ready at %s", path)
