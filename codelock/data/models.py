"""
Data models for CodeLock.

Plain frozen dataclasses for the three slices of application state (config,
session, stats) plus the closed enums for phases, lock modes and burnout
levels. Every layer passes these around instead of loose dicts and strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional

WARNING_SECONDS = 60
MIN_BREAK_DURATION = 180  # seconds
DEFAULT_BREAK_FREQUENCY = 25  # minutes
DEFAULT_TOTAL_DURATION = 60  # minutes


class SessionPhase(str, Enum):
    """Stage of a work/break cycle."""
    IDLE = "idle"
    WORKING = "working"
    WARNING = "warning"
    LOCKED = "locked"
    BREAK_COMPLETE = "break-complete"


class LockMode(str, Enum):
    """Activity chosen while the screen is locked."""
    IDLE = "idle"
    GAME = "game"
    RELAX = "relax"


class BurnoutLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class SessionConfig:
    """Fixed for the lifetime of one session; replaced wholesale on start."""
    total_duration: float = DEFAULT_TOTAL_DURATION   # minutes
    deadline: Optional[datetime] = None
    break_frequency: int = DEFAULT_BREAK_FREQUENCY   # minutes
    break_duration: int = MIN_BREAK_DURATION         # seconds


@dataclass(frozen=True)
class SessionState:
    """
    The live session, advanced once per tick.

    Only one countdown is meaningful per phase:
        working  → next_break_in
        warning  → warning_countdown
        locked   → lock_countdown
    """
    phase: SessionPhase = SessionPhase.IDLE
    start_time: Optional[datetime] = None
    elapsed_time: int = 0           # seconds since session start
    current_break_number: int = 0
    total_breaks: int = 0
    next_break_in: int = 0          # seconds
    warning_countdown: int = WARNING_SECONDS
    lock_countdown: int = MIN_BREAK_DURATION
    lock_mode: LockMode = LockMode.IDLE

    @property
    def is_active(self) -> bool:
        return self.phase != SessionPhase.IDLE


@dataclass(frozen=True)
class UserStats:
    """Lifetime and daily health stats. The only slice that is persisted."""
    break_streak: int = 0
    total_breaks_taken: int = 0
    emergency_overrides_used: int = 0
    last_override_date: Optional[str] = None  # YYYY-MM-DD, local time
    health_score: int = 100                   # 0–100
    burnout_level: BurnoutLevel = BurnoutLevel.LOW
    total_work_seconds: int = 0
    today_work_seconds: int = 0
    last_work_date: Optional[str] = None      # YYYY-MM-DD, local time

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe representation (enum stored by value)."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["burnout_level"] = self.burnout_level.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserStats":
        """
        Merge a stored mapping over the defaults.

        Unknown keys are dropped and a bad burnout value falls back to the
        default, so an older or hand-edited record still loads. A counter
        that is not a finite number, or a date that is not a string, raises
        ValueError / TypeError / OverflowError so the caller can fall back.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}

        level = values.get("burnout_level")
        if level is not None:
            try:
                values["burnout_level"] = BurnoutLevel(level)
            except ValueError:
                values.pop("burnout_level")

        for name in _INT_STATS:
            if name in values:
                values[name] = _as_count(name, values[name])

        for name in _DATE_STATS:
            value = values.get(name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{name} must be a date string, got {type(value).__name__}")

        if "health_score" in values:
            values["health_score"] = max(0, min(100, values["health_score"]))

        return replace(cls(), **values)


_INT_STATS = (
    "break_streak",
    "total_breaks_taken",
    "emergency_overrides_used",
    "health_score",
    "total_work_seconds",
    "today_work_seconds",
)
_DATE_STATS = ("last_override_date", "last_work_date")


def _as_count(name: str, value: Any) -> int:
    # bool is an int subclass and a numeric string is not a number.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    return int(value)


@dataclass(frozen=True)
class AppState:
    config: SessionConfig = field(default_factory=SessionConfig)
    session: SessionState = field(default_factory=SessionState)
    stats: UserStats = field(default_factory=UserStats)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view handed to the driver after every action."""
    config: SessionConfig
    session: SessionState
    stats: UserStats
    can_override_today: bool


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Defines the "shape" of all CodeLock state. Three slices live together in
#   AppState: SessionConfig (fixed per session), SessionState (changes every
#   second) and UserStats (survives restarts).
#
# Key classes and why they exist:
#   - SessionPhase / LockMode / BurnoutLevel: closed enums instead of bare
#     strings, so a typo is an AttributeError and not a silent new phase.
#     They subclass str so the stored values are still "idle", "low", etc.
#   - frozen dataclasses: nobody can mutate a session in place. Services
#     return new values built with dataclasses.replace().
#   - UserStats.to_dict/from_dict: the persistence boundary. from_dict merges
#     over defaults, so a record written by an older version still loads.
#   - Snapshot: what the UI reads. It is a complete, already-transitioned
#     picture, never a half-updated one.
#
# Interviewer-friendly talking points:
#   1. Immutability makes the state machine easy to test: feed in a state,
#      assert on the returned state, the input is untouched.
#   2. str-based enums serialize to JSON without custom encoders.
#   3. Defaults live on the dataclasses, so "reset" is just calling the
#      constructor.
