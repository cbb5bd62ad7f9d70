"""Main application window for IntervalTimer."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QStatusBar, QScrollArea, QMessageBox,
)

from .audio.sounds import CuePlayer
from .settings import Settings, load_settings, save_settings
from .timer.engine import WorkoutSession
from .timer.phases import Phase, WorkoutConfig
from .ui.settings_panel import SettingsPanel
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget
from .ui.workout_history import WorkoutHistoryWidget

logger = logging.getLogger(__name__)

NOTICE_TIMEOUT_MS = 4000


class IntervalTimerApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        db_enabled: bool = True,
        cue_player: CuePlayer | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Workout Timer")
        self.setMinimumSize(420, 640)
        self.resize(460, 860)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self._db_enabled = db_enabled

        # ── session ───────────────────────────────────────────────────
        self._session = WorkoutSession(
            self._settings.workout_config(), self, db_enabled=db_enabled,
        )
        self._settings.apply_workout_config(self._session.config)

        # ── audio ─────────────────────────────────────────────────────
        self._cue_player = cue_player or CuePlayer(parent=self)
        self._cue_player.set_volume(self._settings.sound_volume)
        self._cue_player.set_enabled(self._settings.sound_enabled)

        self.setStyleSheet(build_stylesheet())

        # ── central widget ────────────────────────────────────────────
        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        self.setCentralWidget(scroll)

        central = QWidget(scroll)
        scroll.setWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(20, 12, 20, 12)
        layout.setSpacing(12)

        self._timer_widget = TimerWidget(self._session, central)
        layout.addWidget(self._timer_widget)

        self._settings_panel = SettingsPanel(
            self._session,
            central,
            sound_enabled=self._settings.sound_enabled,
            sound_volume=self._settings.sound_volume,
        )
        layout.addWidget(self._settings_panel)

        self._history = WorkoutHistoryWidget(central)
        self._history.setVisible(db_enabled)
        layout.addWidget(self._history)
        layout.addStretch()

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)

        # ── wire signals ──────────────────────────────────────────────
        self._session.cue.connect(self._cue_player.play_cue)
        self._session.notice.connect(self._show_notice)
        # Queued: the setter returns before the settings file is written.
        self._session.config_changed.connect(
            self._on_config_changed, Qt.ConnectionType.QueuedConnection,
        )
        self._session.state_changed.connect(self._on_state_changed)
        self._settings_panel.sound_changed.connect(self._on_sound_changed)

        self._setup_shortcuts()
        if db_enabled:
            self._history.refresh()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def session(self) -> WorkoutSession:
        return self._session

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def status_text(self) -> str:
        return self._status_bar.currentMessage()

    # ══════════════════════════════════════════════════════════════════
    #  SLOTS
    # ══════════════════════════════════════════════════════════════════

    def _show_notice(self, message: str) -> None:
        self._status_bar.showMessage(message, NOTICE_TIMEOUT_MS)

    def _on_config_changed(self, config: WorkoutConfig) -> None:
        self._settings.apply_workout_config(config)
        save_settings(self._settings)

    def _on_sound_changed(self, enabled: bool, volume: int) -> None:
        self._cue_player.set_enabled(enabled)
        self._cue_player.set_volume(volume)
        self._settings.sound_enabled = enabled
        self._settings.sound_volume = volume
        save_settings(self._settings)

    def _on_state_changed(self, snap) -> None:
        if snap.phase in (Phase.IDLE, Phase.DONE) and self._db_enabled:
            self._history.refresh()

    # ══════════════════════════════════════════════════════════════════
    #  KEYBOARD SHORTCUTS
    # ══════════════════════════════════════════════════════════════════

    def _setup_shortcuts(self) -> None:
        about = QAction("About", self)
        about.setShortcut(QKeySequence("F1"))
        about.triggered.connect(self._show_about)
        self.addAction(about)

    def _on_space(self) -> None:
        """Start, pause, or resume."""
        if self._session.is_running:
            self._session.pause()
        else:
            self._session.start()

    def _on_escape(self) -> None:
        """Reset (no-op when idle)."""
        if self._session.phase != Phase.IDLE:
            self._session.reset()

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About Workout Timer",
            "<h3>Workout Timer</h3>"
            "<p>Interval timer with prep beeps, progress, and saved settings.</p>",
        )

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Handle Space (start/pause) and Escape (reset) globally."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._on_space()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._on_escape()
            event.accept()
            return
        super().keyPressEvent(event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Stop the clock and flush settings before the window goes away."""
        self._session.pause()
        self._cue_player.stop_all()
        save_settings(self._settings)
        event.accept()
