from .database import Database
from .models import (
    AppState, BurnoutLevel, LockMode, SessionConfig, SessionPhase,
    SessionState, Snapshot, UserStats,
)
from .repository import StatsRepository

__all__ = [
    "Database", "AppState", "BurnoutLevel", "LockMode", "SessionConfig",
    "SessionPhase", "SessionState", "Snapshot", "UserStats", "StatsRepository",
]
