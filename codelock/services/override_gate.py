"""
Override Gate: the once-per-day emergency skip.

A user who really cannot stop may skip one break per calendar day. It costs
20 health points and the current break streak.
"""

from __future__ import annotations

from dataclasses import replace

from codelock.data.models import AppState, UserStats
from codelock.services import metrics
from codelock.services.session_clock import resume_work

OVERRIDE_HEALTH_PENALTY = 20


def can_override(stats: UserStats, today: str) -> bool:
    return metrics.can_use_override_today(stats.last_override_date, today)


def use_emergency_override(state: AppState, today: str) -> AppState:
    """
    Skip the current break and go straight back to work.

    Denied (already used today, or no session running) → state unchanged.
    """
    if not state.session.is_active or not can_override(state.stats, today):
        return state

    stats = state.stats
    stats = replace(
        stats,
        emergency_overrides_used=stats.emergency_overrides_used + 1,
        last_override_date=today,
        health_score=metrics.clamp_health(stats.health_score - OVERRIDE_HEALTH_PENALTY),
        break_streak=0,
    )
    stats = replace(stats, burnout_level=metrics.burnout_level(stats))

    return replace(state, session=resume_work(state.session, state.config), stats=stats)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Implements the emergency override: a rate-limited escape hatch from a
#   warning or lockdown.
#
# Key functions:
#   - can_override(): has the user already used today's override?
#   - use_emergency_override(): if allowed, pay the price (health -20,
#     streak reset) and resume work with fresh timers.
#
# Interviewer-friendly talking points:
#   1. A denied override is a no-op, not an exception. The UI already hides
#      the button, so reaching this path means a double click, nothing more.
#   2. "Today" is passed in as a string key. The gate never reads the clock
#      itself, which keeps date rollover tests deterministic.
