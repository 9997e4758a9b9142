"""
Session Clock: advances a session one second at a time.

Every function here is a pure transform: it takes an AppState and returns a
new AppState. All countdown arithmetic and every phase transition of the
work/break cycle lives in this module:

    idle → working → warning → locked → break-complete → working
"""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Optional

from codelock.data.models import (
    MIN_BREAK_DURATION, WARNING_SECONDS, AppState, LockMode, SessionConfig,
    SessionPhase, SessionState, UserStats,
)
from codelock.services import metrics

HEALTH_PER_BREAK = 5


# ── Tick ────────────────────────────────────────────────────────────────────

def tick(state: AppState, today: str) -> AppState:
    """Advance the session by one second. Idle and break-complete hold."""
    return _PHASE_STEPS[state.session.phase](state, today)


def _hold(state: AppState, today: str) -> AppState:
    return state


def _step_working(state: AppState, today: str) -> AppState:
    session = state.session
    next_break_in = max(0, session.next_break_in - 1)
    session = replace(
        session,
        elapsed_time=session.elapsed_time + 1,
        next_break_in=next_break_in,
    )
    # Edge-triggered: the countdown passes through 60 exactly once per break.
    if next_break_in == WARNING_SECONDS:
        session = replace(
            session,
            phase=SessionPhase.WARNING,
            warning_countdown=WARNING_SECONDS,
        )
    return replace(state, session=session, stats=_accumulate_work(state.stats, today))


def _step_warning(state: AppState, today: str) -> AppState:
    session = state.session
    countdown = session.warning_countdown - 1
    if countdown <= 0:
        session = replace(
            _enter_lockdown(session, state.config),
            elapsed_time=session.elapsed_time + 1,
            warning_countdown=0,
        )
    else:
        session = replace(
            session,
            elapsed_time=session.elapsed_time + 1,
            warning_countdown=countdown,
        )
    return replace(state, session=session)


def _step_locked(state: AppState, today: str) -> AppState:
    session = state.session
    countdown = session.lock_countdown - 1
    phase = SessionPhase.BREAK_COMPLETE if countdown <= 0 else session.phase
    session = replace(
        session,
        phase=phase,
        elapsed_time=session.elapsed_time + 1,
        lock_countdown=max(0, countdown),
    )
    return replace(state, session=session)


_PHASE_STEPS: Dict[SessionPhase, Callable[[AppState, str], AppState]] = {
    SessionPhase.IDLE: _hold,
    SessionPhase.WORKING: _step_working,
    SessionPhase.WARNING: _step_warning,
    SessionPhase.LOCKED: _step_locked,
    SessionPhase.BREAK_COMPLETE: _hold,
}

_missing = set(SessionPhase) - set(_PHASE_STEPS)
if _missing:
    raise RuntimeError(f"No tick step for phases: {sorted(p.value for p in _missing)}")


def _accumulate_work(stats: UserStats, today: str) -> UserStats:
    """Add one second of work, restarting the daily counter on a new day."""
    is_new_day = stats.last_work_date != today
    stats = replace(
        stats,
        last_work_date=today,
        today_work_seconds=1 if is_new_day else stats.today_work_seconds + 1,
        total_work_seconds=stats.total_work_seconds + 1,
    )
    return replace(stats, burnout_level=metrics.burnout_level(stats))


# ── Session lifecycle ───────────────────────────────────────────────────────

def start_session(
    state: AppState,
    duration_minutes: float,
    deadline: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> AppState:
    """
    Replace config wholesale and begin a fresh working session.

    Fractional minutes are kept as given. Only non-finite or non-positive
    durations collapse to 0.
    """
    if duration_minutes is None or not math.isfinite(duration_minutes):
        duration_minutes = 0
    duration = max(0, duration_minutes)
    frequency = metrics.break_frequency(duration)

    config = SessionConfig(
        total_duration=duration,
        deadline=deadline,
        break_frequency=frequency,
        break_duration=MIN_BREAK_DURATION,
    )
    session = SessionState(
        phase=SessionPhase.WORKING,
        start_time=now or datetime.now(),
        total_breaks=metrics.total_breaks(duration, frequency),
        next_break_in=frequency * 60,
        warning_countdown=WARNING_SECONDS,
        lock_countdown=config.break_duration,
    )
    return replace(state, config=config, session=session)


def end_session(state: AppState) -> AppState:
    """Back to idle defaults. Stats are untouched."""
    return replace(state, session=SessionState())


# ── Break transitions ───────────────────────────────────────────────────────

def resume_work(session: SessionState, config: SessionConfig) -> SessionState:
    """Fresh work interval: all countdowns reset, phase back to working."""
    return replace(
        session,
        phase=SessionPhase.WORKING,
        next_break_in=config.break_frequency * 60,
        warning_countdown=WARNING_SECONDS,
        lock_countdown=config.break_duration,
        lock_mode=LockMode.IDLE,
    )


def complete_break(state: AppState) -> AppState:
    """Reward a finished break. Only meaningful once the screen has locked."""
    if state.session.phase not in (SessionPhase.LOCKED, SessionPhase.BREAK_COMPLETE):
        return state

    stats = state.stats
    stats = replace(
        stats,
        break_streak=stats.break_streak + 1,
        total_breaks_taken=stats.total_breaks_taken + 1,
        health_score=metrics.clamp_health(stats.health_score + HEALTH_PER_BREAK),
    )
    stats = replace(stats, burnout_level=metrics.burnout_level(stats))

    session = resume_work(state.session, state.config)
    session = replace(session, current_break_number=session.current_break_number + 1)
    return replace(state, session=session, stats=stats)


# The mini-game's win ends the lockdown early, whatever is left on the clock.
game_win = complete_break


def trigger_warning(state: AppState) -> AppState:
    if not state.session.is_active:
        return state
    session = replace(
        state.session,
        phase=SessionPhase.WARNING,
        warning_countdown=WARNING_SECONDS,
    )
    return replace(state, session=session)


def trigger_lockdown(state: AppState) -> AppState:
    if not state.session.is_active:
        return state
    return replace(state, session=_enter_lockdown(state.session, state.config))


def set_lock_mode(state: AppState, mode: LockMode) -> AppState:
    if state.session.phase != SessionPhase.LOCKED:
        return state
    try:
        mode = LockMode(mode)
    except ValueError:
        return state
    return replace(state, session=replace(state.session, lock_mode=mode))


def _enter_lockdown(session: SessionState, config: SessionConfig) -> SessionState:
    return replace(
        session,
        phase=SessionPhase.LOCKED,
        lock_countdown=config.break_duration,
        lock_mode=LockMode.IDLE,
    )


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The heart of CodeLock: a state machine advanced by tick(). One tick is
#   one second. Each phase has its own step function, picked from a table.
#
# Key functions:
#   - tick(): dispatches on the phase. working counts down to the next break
#     and logs work time, warning counts down 60s, locked counts down the
#     break, idle and break-complete do nothing.
#   - start_session()/end_session(): enter and leave the cycle.
#   - complete_break()/game_win(): the only way out of break-complete (or an
#     early way out of locked), rewards the user with +5 health.
#   - trigger_warning()/trigger_lockdown(): manual shortcuts, skip the timers.
#
# Data flow:
#   QTimer (1 Hz) → StateStore.tick() → session_clock.tick(state, today) →
#   new AppState → store saves stats → UI renders snapshot
#
# Interviewer-friendly talking points:
#   1. The phase table is checked at import time. Add a phase to the enum and
#      forget a step here, and the module refuses to load.
#   2. The warning fires on "== 60", not "<= 60": it happens exactly once per
#      breakpoint because the phase leaves working on that same tick.
#   3. Countdowns are floored at 0 when a phase ends, so the UI never shows
#      "-0:01".
