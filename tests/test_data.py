"""Unit tests for the data layer (database, repository, models)."""

import json
import sqlite3
import pytest
from dataclasses import FrozenInstanceError

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from codelock.data.database import Database, SCHEMA_SQL
from codelock.data.models import BurnoutLevel, SessionPhase, SessionState, UserStats
from codelock.data.repository import STORAGE_KEY, StatsRepository


@pytest.fixture
def repo():
    """Create an in-memory database for testing."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA_SQL)
    conn.commit()
    return StatsRepository(conn)


class TestModels:
    def test_defaults(self):
        session = SessionState()
        assert session.phase == SessionPhase.IDLE
        assert session.warning_countdown == 60
        assert session.lock_countdown == 180
        assert not session.is_active

        stats = UserStats()
        assert stats.health_score == 100
        assert stats.burnout_level == BurnoutLevel.LOW
        assert stats.last_override_date is None

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            UserStats().break_streak = 3

    def test_phase_values(self):
        assert SessionPhase.BREAK_COMPLETE.value == "break-complete"
        assert SessionPhase("locked") is SessionPhase.LOCKED

    def test_to_dict_is_json_safe(self):
        data = UserStats(burnout_level=BurnoutLevel.HIGH).to_dict()
        assert data["burnout_level"] == "high"
        assert json.loads(json.dumps(data)) == data

    def test_from_dict_merges_and_cleans(self):
        stats = UserStats.from_dict({
            "break_streak": 2,
            "health_score": 150,
            "burnout_level": "extreme",
            "legacy_field": True,
        })
        assert stats.break_streak == 2
        assert stats.health_score == 100
        assert stats.burnout_level == BurnoutLevel.LOW

    def test_from_dict_round_trip(self):
        stats = UserStats(
            break_streak=3, total_breaks_taken=10, emergency_overrides_used=1,
            last_override_date="2024-03-09", health_score=75,
            burnout_level=BurnoutLevel.MEDIUM, total_work_seconds=7200,
            today_work_seconds=3600, last_work_date="2024-03-09",
        )
        assert UserStats.from_dict(stats.to_dict()) == stats


class TestDatabase:
    def test_connect_creates_schema(self, tmp_path):
        db = Database(db_path=tmp_path / "codelock.db")
        conn = db.connect()
        tables = {
            r["name"] for r in conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )
        }
        assert "kv_store" in tables
        assert db.connect() is conn
        db.close()
        assert db.conn is None

    def test_stats_survive_reconnect(self, tmp_path):
        path = tmp_path / "codelock.db"
        db = Database(db_path=path)
        StatsRepository(db.connect()).save_stats(UserStats(break_streak=5))
        db.close()

        db = Database(db_path=path)
        loaded = StatsRepository(db.connect()).load_stats()
        db.close()
        assert loaded.break_streak == 5


class TestStatsRepository:
    def test_empty(self, repo):
        assert repo.load_stats() is None
        assert repo.get_value(STORAGE_KEY) is None

    def test_save_and_load(self, repo):
        repo.save_stats(UserStats(total_breaks_taken=4, health_score=90))
        loaded = repo.load_stats()
        assert loaded.total_breaks_taken == 4
        assert loaded.health_score == 90

    def test_save_overwrites(self, repo):
        repo.save_stats(UserStats(break_streak=1))
        repo.save_stats(UserStats(break_streak=2))
        assert repo.load_stats().break_streak == 2
        count = repo.conn.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0]
        assert count == 1

    def test_record_layout(self, repo):
        repo.save_stats(UserStats())
        payload = json.loads(repo.get_value(STORAGE_KEY))
        assert list(payload) == ["stats"]
        assert payload["stats"]["health_score"] == 100

    def test_corrupt_record_raises(self, repo):
        repo.set_value(STORAGE_KEY, "not json")
        with pytest.raises(ValueError):
            repo.load_stats()

    def test_wrong_field_types_raise(self, repo):
        repo.set_value(STORAGE_KEY, json.dumps({"stats": {"today_work_seconds": "12"}}))
        with pytest.raises(TypeError):
            repo.load_stats()

        repo.set_value(STORAGE_KEY, json.dumps({"stats": {"last_work_date": 20240309}}))
        with pytest.raises(TypeError):
            repo.load_stats()

    def test_infinite_counter_raises(self, repo):
        repo.set_value(STORAGE_KEY, '{"stats": {"total_work_seconds": Infinity}}')
        with pytest.raises(OverflowError):
            repo.load_stats()
