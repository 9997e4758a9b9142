"""Unit tests for the metrics engine."""

import pytest
from datetime import datetime
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from codelock.data.models import BurnoutLevel, SessionConfig, SessionState, UserStats
from codelock.services import metrics


class TestBreakCadence:
    @pytest.mark.parametrize("duration,expected", [
        (15, 15), (30, 15), (31, 20), (60, 20), (61, 25),
        (120, 25), (121, 30), (240, 30),
    ])
    def test_break_frequency_steps(self, duration, expected):
        assert metrics.break_frequency(duration) == expected

    def test_frequency_monotonic(self):
        freqs = [metrics.break_frequency(d) for d in range(1, 500)]
        assert freqs == sorted(freqs)

    def test_total_breaks_is_floor(self):
        for d in range(1, 500):
            freq = metrics.break_frequency(d)
            assert metrics.total_breaks(d, freq) == d // freq

    def test_short_session_has_zero_breaks(self):
        assert metrics.total_breaks(10, metrics.break_frequency(10)) == 0

    def test_sixty_minute_session(self):
        freq = metrics.break_frequency(60)
        assert freq == 20
        assert metrics.total_breaks(60, freq) == 3

    def test_invalid_inputs_clamp(self):
        assert metrics.break_frequency(-10) == 15
        assert metrics.break_frequency(float("nan")) == 15
        assert metrics.total_breaks(-10, 15) == 0
        assert metrics.total_breaks(60, 0) == 0
        assert metrics.total_breaks(float("inf"), 30) == 0


class TestBurnout:
    def test_low(self):
        stats = UserStats(health_score=85, today_work_seconds=3 * 3600)
        assert metrics.burnout_level(stats) == BurnoutLevel.LOW

    def test_medium(self):
        stats = UserStats(health_score=60, today_work_seconds=7 * 3600)
        assert metrics.burnout_level(stats) == BurnoutLevel.MEDIUM

    def test_high(self):
        stats = UserStats(health_score=30, today_work_seconds=7 * 3600)
        assert metrics.burnout_level(stats) == BurnoutLevel.HIGH

    def test_low_health_few_hours_is_medium(self):
        stats = UserStats(health_score=10, today_work_seconds=1 * 3600)
        assert metrics.burnout_level(stats) == BurnoutLevel.MEDIUM

    def test_boundaries(self):
        assert metrics.burnout_level(
            UserStats(health_score=80, today_work_seconds=4 * 3600)
        ) == BurnoutLevel.LOW
        assert metrics.burnout_level(
            UserStats(health_score=49, today_work_seconds=6 * 3600)
        ) == BurnoutLevel.MEDIUM
        assert metrics.burnout_level(
            UserStats(health_score=49, today_work_seconds=6 * 3600 + 1)
        ) == BurnoutLevel.HIGH

    def test_clamp_health(self):
        assert metrics.clamp_health(105) == 100
        assert metrics.clamp_health(-5) == 0
        assert metrics.clamp_health(42) == 42


class TestOverrideDate:
    def test_never_used(self):
        assert metrics.can_use_override_today(None, "2024-03-09")

    def test_used_today(self):
        assert not metrics.can_use_override_today("2024-03-09", "2024-03-09")

    def test_used_yesterday(self):
        assert metrics.can_use_override_today("2024-03-08", "2024-03-09")

    def test_today_key_is_local_day(self):
        assert metrics.today_key(datetime(2024, 3, 9, 23, 59)) == "2024-03-09"


class TestDisplay:
    def test_format_seconds(self):
        assert metrics.format_seconds(300) == "5m"
        assert metrics.format_seconds(3900) == "1h 5m"
        assert metrics.format_seconds(-10) == "0m"

    def test_format_clock(self):
        assert metrics.format_clock(65) == "1:05"
        assert metrics.format_clock(180) == "3:00"
        assert metrics.format_clock(0) == "0:00"

    def test_progress_and_remaining(self):
        config = SessionConfig(total_duration=60)
        session = SessionState(elapsed_time=900)
        assert metrics.session_progress(config, session) == 25.0
        assert metrics.session_remaining(config, session) == 2700

    def test_progress_past_end(self):
        config = SessionConfig(total_duration=1)
        session = SessionState(elapsed_time=600)
        assert metrics.session_progress(config, session) == 100.0
        assert metrics.session_remaining(config, session) == 0

    def test_progress_zero_duration(self):
        config = SessionConfig(total_duration=0)
        assert metrics.session_progress(config, SessionState(elapsed_time=5)) == 0.0
