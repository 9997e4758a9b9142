"""
Repository: the single place where SQL lives.

CodeLock persists exactly one record: the user's stats, stored as JSON under
STORAGE_KEY. Everything above this layer sees UserStats objects, never rows.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Any, Dict, Optional

from .models import UserStats

STORAGE_KEY = "codelock-state"


class StatsRepository:
    """Data-access layer for the persisted stats blob."""

    def __init__(self, conn: sqlite3.Connection, key: str = STORAGE_KEY) -> None:
        self.conn = conn
        self.key = key

    # ── Raw key-value access ────────────────────────────────────────────────

    def get_value(self, key: str) -> Optional[str]:
        row = self.conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set_value(self, key: str, value: str) -> None:
        self.conn.execute(
            "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
            "updated_at = excluded.updated_at",
            (key, value, datetime.now().isoformat()),
        )
        self.conn.commit()

    # ── Stats ───────────────────────────────────────────────────────────────

    def load_stats(self) -> Optional[UserStats]:
        """
        Return the stored stats, or None when no record exists.

        Raises sqlite3.Error / ValueError / TypeError / OverflowError on a
        broken store or a corrupt record; the caller decides how to degrade.
        """
        raw = self.get_value(self.key)
        if raw is None:
            return None
        payload: Dict[str, Any] = json.loads(raw)
        if not isinstance(payload, dict):
            raise ValueError(f"Stored record under {self.key!r} is not an object")
        stats = payload.get("stats") or {}
        if not isinstance(stats, dict):
            raise ValueError(f"Stored stats under {self.key!r} is not an object")
        return UserStats.from_dict(stats)

    def save_stats(self, stats: UserStats) -> None:
        """Persist the stats slice only. Config and session never reach disk."""
        self.set_value(self.key, json.dumps({"stats": stats.to_dict()}))


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The StatsRepository is the ONLY place raw SQL queries live. The state
#   store calls load_stats()/save_stats() and never sees a cursor.
#
# Key methods:
#   - get_value/set_value: a generic key-value API on top of one table.
#     set_value is an UPSERT, so saving is one statement.
#   - load_stats: JSON → UserStats, merged over defaults.
#   - save_stats: wraps the stats in {"stats": {...}} so the record format
#     can grow other top-level keys later.
#
# Data flow:
#   StateStore action → stats changed → repo.save_stats() → SQL UPSERT
#   App start → repo.load_stats() → UserStats (or None → defaults)
#
# Interviewer-friendly talking points:
#   1. Errors are raised, not swallowed, here. Swallowing is a policy
#      decision and belongs to the store, which knows it can run in memory.
#   2. Only stats are persisted. A restart mid-session drops you back to
#      idle, which is the safe outcome for a break enforcer.
