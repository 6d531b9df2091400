from __future__ import annotations

import logging
from pulsemon.storage.db import SQLiteDatabase

logger = logging.getLogger("pulsemon.migrations")

SCHEMA_VERSION = 1


def apply_migrations(db: SQLiteDatabase) -> None:
    conn = db.connect()
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_meta ("
        "id INTEGER PRIMARY KEY CHECK (id=1), "
        "version INTEGER NOT NULL"
        ");"
    )
    row = conn.execute("SELECT version FROM schema_meta WHERE id=1;").fetchone()
    if row is None:
        conn.execute("INSERT INTO schema_meta(id, version) VALUES (1, 0);")
        row = conn.execute("SELECT version FROM schema_meta WHERE id=1;").fetchone()

    ver = int(row["version"])
    if ver >= SCHEMA_VERSION:
        return

    logger.info("migrating schema from %s to %s", ver, SCHEMA_VERSION)

    if ver < 1:
        _migrate_v1(conn)
        conn.execute("UPDATE schema_meta SET version=? WHERE id=1;", (1,))

    logger.info("migrations done")


def _migrate_v1(conn) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS settings (
          key TEXT PRIMARY KEY,
          value TEXT NOT NULL,
          updated_at_utc TEXT NOT NULL
        );
        """
    )
