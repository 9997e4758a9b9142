"""
SQLite database initialization and connection management.

Single responsibility: own the connection and create the key-value table.
Reading and writing records lives in StatsRepository.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Default DB lives next to the repo root
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent.parent / "codelock.db"

SCHEMA_SQL = """
-- Key-value store -------------------------------------------------------------
CREATE TABLE IF NOT EXISTS kv_store (
    key         TEXT    PRIMARY KEY,
    value       TEXT    NOT NULL,
    updated_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""


class Database:
    """Thin wrapper around a SQLite connection."""

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.conn: Optional[sqlite3.Connection] = None

    # -- lifecycle -----------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """Open (or return existing) connection and ensure schema exists."""
        if self.conn is not None:
            return self.conn
        logger.info("Connecting to SQLite at %s", self.db_path)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self._create_tables()
        return self.conn

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("Database connection closed.")

    # -- internal ------------------------------------------------------------

    def _create_tables(self) -> None:
        assert self.conn is not None
        self.conn.executescript(SCHEMA_SQL)
        self.conn.commit()
        logger.info("Database schema ensured.")


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Opens the SQLite file and makes sure the single kv_store table exists.
#
# Key pieces:
#   - SCHEMA_SQL: one key/value table. CREATE IF NOT EXISTS makes startup
#     idempotent.
#   - Database class: holds one connection with dict-like rows.
#
# Data flow:
#   App start → Database.connect() → table created → StatsRepository uses conn
#
# Interviewer-friendly talking points:
#   1. Why SQLite for one record? It gives atomic writes for free, so a
#      crash mid-save never leaves a half-written JSON file behind.
#   2. The stats blob is opaque to the schema; adding a stats field never
#      needs a migration.
