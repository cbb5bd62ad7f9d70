"""Main timer card.

Layout (top → bottom):
    - Phase label ("Get Ready", "WORK", "REST", ...)
    - ProgressRing with the remaining seconds
    - "Set N of M"
    - "~N min left"
    - Start / Pause / Reset
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame, QSizePolicy,
)

from ..timer.engine import WorkoutSession, SessionSnapshot
from ..timer.phases import Phase
from .progress_ring import ProgressRing
from .styles import PHASE_COLORS, PHASE_LABELS, format_time


class TimerWidget(QWidget):
    """Phase, countdown ring, set counter and the three controls."""

    def __init__(self, session: WorkoutSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._session = session
        self._build_ui()
        self._connect_signals()
        self.refresh(session.snapshot())

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(12)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._phase_label = QLabel(card)
        self._phase_label.setObjectName("phaseLabel")
        self._phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._phase_label)

        ring_row = QHBoxLayout()
        ring_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._ring = ProgressRing(card)
        self._ring.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self._ring.setFixedSize(220, 220)
        ring_row.addWidget(self._ring)
        layout.addLayout(ring_row)

        self._set_label = QLabel(card)
        self._set_label.setObjectName("setLabel")
        self._set_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._set_label)

        self._estimate_label = QLabel(card)
        self._estimate_label.setObjectName("estimateLabel")
        self._estimate_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._estimate_label)

        btn_row = QHBoxLayout()
        btn_row.setSpacing(10)

        self._start_btn = QPushButton("Start", card)
        self._start_btn.setObjectName("startButton")
        self._pause_btn = QPushButton("Pause", card)
        self._pause_btn.setObjectName("pauseButton")
        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("resetButton")

        for btn in (self._start_btn, self._pause_btn, self._reset_btn):
            btn_row.addWidget(btn, 1)
        layout.addLayout(btn_row)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_btn.clicked.connect(self._session.start)
        self._pause_btn.clicked.connect(self._session.pause)
        self._reset_btn.clicked.connect(self._session.reset)
        self._session.state_changed.connect(self.refresh)

    # ── slots ─────────────────────────────────────────────────────────────

    def refresh(self, snap: SessionSnapshot) -> None:
        self._phase_label.setText(PHASE_LABELS[snap.phase])
        self._phase_label.setStyleSheet(f"color: {PHASE_COLORS[snap.phase][0]};")

        self._ring.set_time_text(format_time(snap.seconds_remaining))
        self._ring.set_fraction(snap.progress)
        self._ring.apply_phase(
            snap.phase, paused=snap.locked and not snap.is_running,
        )

        sets_done = snap.total_sets if snap.phase == Phase.DONE else snap.current_set - 1
        self._ring.set_sets(sets_done, snap.total_sets)

        shown_set = max(1, min(snap.current_set, snap.total_sets))
        self._set_label.setText(f"Set {shown_set} of {snap.total_sets}")
        self._estimate_label.setText(f"~{snap.minutes_remaining} min left")

        self._start_btn.setText("Resume" if snap.locked and not snap.is_running else "Start")
        self._start_btn.setEnabled(not snap.is_running and snap.phase != Phase.DONE)
        self._pause_btn.setEnabled(snap.is_running)

    # ── accessors (tests, shortcuts) ──────────────────────────────────────

    @property
    def phase_text(self) -> str:
        return self._phase_label.text()

    @property
    def set_text(self) -> str:
        return self._set_label.text()

    @property
    def estimate_text(self) -> str:
        return self._estimate_label.text()

    @property
    def ring(self) -> ProgressRing:
        return self._ring
