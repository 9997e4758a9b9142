"""
Session Driver: the 1 Hz heartbeat that moves the state machine.

Runs a QTimer while a session is active and re-emits every store snapshot as
a Qt signal, so widgets update on the Qt event loop.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer, Signal

from codelock.data.models import SessionPhase, Snapshot
from codelock.services.state_store import StateStore

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class SessionDriver(QObject):
    """
    Calls store.tick() once per second while the phase is not idle.

    The timer starts and stops itself from the phase in each snapshot, so
    callers only ever talk to the store.
    """

    snapshot_changed = Signal(object)  # Snapshot

    def __init__(self, store: StateStore, parent: QObject = None) -> None:
        super().__init__(parent)
        self.store = store

        self._timer = QTimer(self)
        self._timer.setInterval(TICK_INTERVAL_MS)
        self._timer.timeout.connect(self._on_timeout)

        self.store.subscribe(self._on_snapshot)

    @property
    def running(self) -> bool:
        return self._timer.isActive()

    def refresh(self) -> None:
        """Emit the current snapshot without changing state."""
        self._on_snapshot(self.store.snapshot())

    def stop(self) -> None:
        self._timer.stop()

    # ── Internal ────────────────────────────────────────────────────────────

    def _on_timeout(self) -> None:
        self.store.tick()

    def _on_snapshot(self, snap: Snapshot) -> None:
        active = snap.session.phase != SessionPhase.IDLE
        if active and not self._timer.isActive():
            self._timer.start()
            logger.info("Tick timer started.")
        elif not active and self._timer.isActive():
            self._timer.stop()
            logger.info("Tick timer stopped.")
        self.snapshot_changed.emit(snap)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Turns wall-clock time into ticks. Every second the QTimer fires, the
#   store advances one step, and the new snapshot goes out as a signal.
#
# Key design decisions:
#   - QTimer instead of threading.Timer: the callback runs on the Qt main
#     thread, so the store never sees two ticks at once and widgets can be
#     touched directly.
#   - The driver watches the phase itself, so "stop ticking when idle" is
#     not something every button handler has to remember.
#   - The timer keeps running in break-complete; the tick is a no-op there
#     and the user still needs the screen to stay live.
#
# Interviewer-friendly talking points:
#   1. Single source of truth: widgets display the store's countdowns and
#      never run their own timers, so the numbers cannot drift apart.
#   2. A missed timer cycle (machine asleep) just means a late tick, no
#      double-processing.
