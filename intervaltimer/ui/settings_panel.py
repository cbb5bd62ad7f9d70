"""Settings panel shown under the timer card.

Work / Rest / Sets open a number picker; the prep switch applies at once.
Every change goes through the session, which refuses while a workout is
in progress and clamps the set count to the 3-hour cap.  Sound options
are not part of the workout and stay editable at all times.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFrame, QLabel, QPushButton,
    QCheckBox, QSlider, QInputDialog,
)

from ..timer.engine import WorkoutSession, SessionSnapshot, LOCKED_MESSAGE
from ..timer.phases import WorkoutConfig, MIN_PHASE_SECONDS, MAX_PHASE_SECONDS

# (parent, title, current, minimum, maximum) -> picked value, or None on cancel
NumberPicker = Callable[[QWidget, str, int, int, int], "int | None"]


def dialog_picker(
    parent: QWidget, title: str, current: int, minimum: int, maximum: int,
) -> int | None:
    value, ok = QInputDialog.getInt(
        parent, title, title, max(minimum, min(current, maximum)), minimum, maximum,
    )
    return value if ok else None


class SettingsPanel(QWidget):
    """Work, rest, sets, prep toggle, and sound preferences."""

    sound_changed = pyqtSignal(bool, int)  # enabled, volume

    def __init__(
        self,
        session: WorkoutSession,
        parent: QWidget | None = None,
        *,
        sound_enabled: bool = True,
        sound_volume: int = 80,
        picker: NumberPicker | None = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._picker = picker or dialog_picker
        self._build_ui()
        self._sound_cb.setChecked(sound_enabled)
        self._vol_slider.setValue(sound_volume)
        self._vol_label.setText(f"{sound_volume}%")
        self._connect_signals()
        self._populate(session.config)
        self._on_state_changed(session.snapshot())

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        title = QLabel("Settings", card)
        title.setObjectName("sectionLabel")
        layout.addWidget(title)

        self._work_btn = self._setting_button(card)
        self._rest_btn = self._setting_button(card)
        self._sets_btn = self._setting_button(card)
        for btn in (self._work_btn, self._rest_btn, self._sets_btn):
            layout.addWidget(btn)

        self._prep_cb = QCheckBox("Enable 3-second setup countdown", card)
        layout.addWidget(self._prep_cb)

        self._locked_label = QLabel(LOCKED_MESSAGE, card)
        self._locked_label.setObjectName("lockedLabel")
        layout.addWidget(self._locked_label)

        # ── sound ────────────────────────────────────────────────────
        self._sound_cb = QCheckBox("Sound cues", card)
        layout.addWidget(self._sound_cb)

        vol_row = QHBoxLayout()
        vol_row.setSpacing(10)
        self._vol_slider = QSlider(Qt.Orientation.Horizontal, card)
        self._vol_slider.setRange(0, 100)
        self._vol_slider.setTickInterval(10)
        self._vol_label = QLabel("80%", card)
        self._vol_label.setMinimumWidth(36)
        vol_row.addWidget(self._vol_slider)
        vol_row.addWidget(self._vol_label)
        layout.addLayout(vol_row)

    @staticmethod
    def _setting_button(parent: QWidget) -> QPushButton:
        btn = QPushButton(parent)
        btn.setObjectName("settingButton")
        return btn

    def _connect_signals(self) -> None:
        self._work_btn.clicked.connect(self._pick_work)
        self._rest_btn.clicked.connect(self._pick_rest)
        self._sets_btn.clicked.connect(self._pick_sets)
        self._prep_cb.toggled.connect(self._on_prep_toggled)
        self._sound_cb.toggled.connect(self._on_sound_changed)
        self._vol_slider.valueChanged.connect(self._on_volume_changed)

        self._session.config_changed.connect(self._populate)
        self._session.state_changed.connect(self._on_state_changed)

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE
    # ══════════════════════════════════════════════════════════════════

    def _populate(self, config: WorkoutConfig) -> None:
        self._work_btn.setText(f"Work\t{config.work_seconds} sec")
        self._rest_btn.setText(f"Rest\t{config.rest_seconds} sec")
        self._sets_btn.setText(f"Sets\t{config.total_sets}")
        self._prep_cb.blockSignals(True)
        self._prep_cb.setChecked(config.prep_enabled)
        self._prep_cb.blockSignals(False)

    def _on_state_changed(self, snap: SessionSnapshot) -> None:
        self._locked_label.setVisible(snap.locked)
        for widget in (self._work_btn, self._rest_btn, self._sets_btn, self._prep_cb):
            widget.setEnabled(not snap.locked)

    # ══════════════════════════════════════════════════════════════════
    #  CHANGE HANDLERS
    # ══════════════════════════════════════════════════════════════════

    def _pick_work(self) -> None:
        if not self._session.ensure_unlocked():
            return
        picked = self._picker(
            self, "Work (seconds)", self._session.config.work_seconds,
            MIN_PHASE_SECONDS, MAX_PHASE_SECONDS,
        )
        self._session.set_work_seconds(picked)

    def _pick_rest(self) -> None:
        if not self._session.ensure_unlocked():
            return
        picked = self._picker(
            self, "Rest (seconds)", self._session.config.rest_seconds,
            MIN_PHASE_SECONDS, MAX_PHASE_SECONDS,
        )
        self._session.set_rest_seconds(picked)

    def _pick_sets(self) -> None:
        if not self._session.ensure_unlocked():
            return
        picked = self._picker(
            self, "Total Sets", self._session.config.total_sets,
            1, self._session.max_allowed_sets(),
        )
        self._session.set_total_sets(picked)

    def _on_prep_toggled(self, checked: bool) -> None:
        change = self._session.set_prep_enabled(checked)
        if not change.accepted:
            self._populate(self._session.config)

    def _on_sound_changed(self, _checked: bool = False) -> None:
        self.sound_changed.emit(self._sound_cb.isChecked(), self._vol_slider.value())

    def _on_volume_changed(self, value: int) -> None:
        self._vol_label.setText(f"{value}%")
        self._on_sound_changed()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def work_text(self) -> str:
        return self._work_btn.text()

    @property
    def sets_text(self) -> str:
        return self._sets_btn.text()

    @property
    def prep_checked(self) -> bool:
        return self._prep_cb.isChecked()

    @property
    def locked_hint_visible(self) -> bool:
        return not self._locked_label.isHidden()

    def click_work(self) -> None:
        self._work_btn.click()

    def click_sets(self) -> None:
        self._sets_btn.click()

    def toggle_prep(self) -> None:
        self._prep_cb.click()
