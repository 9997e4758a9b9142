"""
Main Window: renders the current snapshot and forwards button clicks.

Contains:
  - Session setup (duration, optional deadline)
  - Live phase / countdown display
  - Warning and lockdown controls (override, lock mode, finish break)
  - Daily / lifetime stats line
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QApplication, QCheckBox, QHBoxLayout, QLabel, QMainWindow, QMessageBox,
    QPushButton, QSpinBox, QVBoxLayout, QWidget,
)

from codelock.data.database import Database
from codelock.data.models import LockMode, SessionPhase, Snapshot
from codelock.data.repository import StatsRepository
from codelock.services import metrics
from codelock.services.state_store import StateStore
from codelock.ui.driver import SessionDriver
from codelock.ui.messages import (
    BREAK_MESSAGES, LOCKDOWN_MESSAGES, WARNING_MESSAGES, MessagePicker,
)

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """The main application window."""

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("CodeLock")
        self.setMinimumSize(520, 420)

        # ── Initialize core systems ─────────────────────────────────────
        self.db = Database()
        self.db.connect()
        self.store = StateStore(StatsRepository(self.db.conn))
        self.driver = SessionDriver(self.store, self)
        self.driver.snapshot_changed.connect(self._render)

        self._warning_picker = MessagePicker(WARNING_MESSAGES)
        self._lockdown_picker = MessagePicker(LOCKDOWN_MESSAGES)
        self._break_picker = MessagePicker(BREAK_MESSAGES)
        self._last_phase = SessionPhase.IDLE

        self._build_ui()
        self.driver.refresh()

    # ── UI Construction ─────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setSpacing(12)
        layout.setContentsMargins(24, 24, 24, 24)

        self.state_label = QLabel("Ready to code?")
        self.state_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.state_label)

        self.timer_label = QLabel("0:00")
        self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.timer_label)

        self.message_label = QLabel("")
        self.message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.message_label.setWordWrap(True)
        layout.addWidget(self.message_label)

        # ── Setup row ───────────────────────────────────────────────
        setup = QHBoxLayout()
        self.duration_spin = QSpinBox()
        self.duration_spin.setRange(15, 240)
        self.duration_spin.setSingleStep(15)
        self.duration_spin.setValue(60)
        self.duration_spin.setSuffix(" min")
        setup.addWidget(self.duration_spin)

        self.deadline_check = QCheckBox("Deadline")
        setup.addWidget(self.deadline_check)
        self.deadline_spin = QSpinBox()
        self.deadline_spin.setRange(1, 12)
        self.deadline_spin.setValue(2)
        self.deadline_spin.setSuffix(" h")
        setup.addWidget(self.deadline_spin)

        self.btn_start = QPushButton("Start Session")
        self.btn_start.clicked.connect(self._on_start)
        setup.addWidget(self.btn_start)

        self.btn_end = QPushButton("End Session")
        self.btn_end.clicked.connect(lambda: self.store.end_session())
        setup.addWidget(self.btn_end)
        layout.addLayout(setup)

        # ── Break controls ──────────────────────────────────────────
        controls = QHBoxLayout()
        self.btn_override = QPushButton("Emergency Override")
        self.btn_override.clicked.connect(self._on_override)
        controls.addWidget(self.btn_override)

        self.mode_buttons = {}
        for mode in LockMode:
            btn = QPushButton(mode.value.title())
            btn.clicked.connect(lambda _=False, m=mode: self.store.set_lock_mode(m))
            controls.addWidget(btn)
            self.mode_buttons[mode] = btn

        self.btn_game_won = QPushButton("Game Won")
        self.btn_game_won.clicked.connect(lambda: self.store.game_win())
        controls.addWidget(self.btn_game_won)

        self.btn_complete = QPushButton("Back to Work")
        self.btn_complete.clicked.connect(lambda: self.store.complete_break())
        controls.addWidget(self.btn_complete)
        layout.addLayout(controls)

        self.stats_label = QLabel("")
        self.stats_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.stats_label)

        layout.addStretch()

    # ── Actions ─────────────────────────────────────────────────────────

    @Slot()
    def _on_start(self) -> None:
        deadline = None
        if self.deadline_check.isChecked():
            deadline = datetime.now() + timedelta(hours=self.deadline_spin.value())
        self.store.start_session(self.duration_spin.value(), deadline)

    @Slot()
    def _on_override(self) -> None:
        reply = QMessageBox.question(
            self, "Emergency Override",
            "Skip this break?\n\nCosts 20 health and resets your streak. "
            "You get one per day.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.store.use_emergency_override()

    # ── Rendering ───────────────────────────────────────────────────────

    @Slot(object)
    def _render(self, snap: Snapshot) -> None:
        session, config, stats = snap.session, snap.config, snap.stats
        phase = session.phase

        if phase != self._last_phase:
            self._on_phase_entered(phase)
            self._last_phase = phase

        if phase == SessionPhase.IDLE:
            self.state_label.setText("Ready to code?")
            self.timer_label.setText(
                f"Break every {metrics.break_frequency(self.duration_spin.value())} min"
            )
        elif phase == SessionPhase.WORKING:
            self.state_label.setText(
                f"Working: break {session.current_break_number + 1} of "
                f"{session.total_breaks} "
                f"({metrics.session_progress(config, session):.0f}% done)"
            )
            self.timer_label.setText(
                f"Next break in {metrics.format_clock(session.next_break_in)} | "
                f"{metrics.format_seconds(metrics.session_remaining(config, session))} left"
            )
        elif phase == SessionPhase.WARNING:
            self.state_label.setText("Break incoming")
            self.timer_label.setText(metrics.format_clock(session.warning_countdown))
        elif phase == SessionPhase.LOCKED:
            self.state_label.setText(f"Locked ({session.lock_mode.value})")
            self.timer_label.setText(metrics.format_clock(session.lock_countdown))
        elif phase == SessionPhase.BREAK_COMPLETE:
            self.state_label.setText("Break complete")
            self.timer_label.setText("0:00")

        idle = phase == SessionPhase.IDLE
        locked = phase == SessionPhase.LOCKED
        self.btn_start.setEnabled(idle)
        self.btn_end.setEnabled(not idle)
        self.btn_override.setEnabled(
            phase in (SessionPhase.WARNING, SessionPhase.LOCKED) and snap.can_override_today
        )
        for btn in self.mode_buttons.values():
            btn.setEnabled(locked)
        self.btn_game_won.setEnabled(locked and session.lock_mode == LockMode.GAME)
        self.btn_complete.setEnabled(phase == SessionPhase.BREAK_COMPLETE)

        self.stats_label.setText(
            f"Streak {stats.break_streak} | Health {stats.health_score} "
            f"({stats.burnout_level.value}) | "
            f"Today {metrics.format_seconds(stats.today_work_seconds)} | "
            f"Total {metrics.format_seconds(stats.total_work_seconds)}"
        )

    def _on_phase_entered(self, phase: SessionPhase) -> None:
        if phase == SessionPhase.WARNING:
            self.message_label.setText(self._warning_picker.pick())
        elif phase == SessionPhase.LOCKED:
            self.message_label.setText(
                f"{self._lockdown_picker.pick()}\n{self._break_picker.pick()}"
            )
        else:
            self.message_label.setText("")

    # ── Misc ────────────────────────────────────────────────────────────

    def closeEvent(self, event: QCloseEvent) -> None:
        if self.store.session.phase in (SessionPhase.WARNING, SessionPhase.LOCKED):
            # No escaping a break by closing the window.
            event.ignore()
            return
        self.driver.stop()
        self.db.close()
        event.accept()
        QApplication.quit()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The visible face of CodeLock. It holds no session logic: every button
#   calls a StateStore action and every label is filled from the snapshot
#   the driver emits.
#
# Key pieces:
#   - _render(): one function maps a snapshot to widget text and enabled
#     states. Called after every action and every tick.
#   - MessagePicker instances: owned here, not global, so each pool cycles
#     through all its messages before repeating.
#   - closeEvent(): refuses to close during a warning or lockdown.
#
# Interviewer-friendly talking points:
#   1. Dumb view, smart store: the window can be replaced (web, tray,
#      terminal) without touching the state machine.
#   2. No local countdown timers. The label shows lock_countdown straight
#      from the snapshot, so the display and the logic always agree.
