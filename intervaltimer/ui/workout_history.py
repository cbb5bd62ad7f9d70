"""Recent workouts list, shown under the settings panel."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QLabel

from ..database.db import recent_workouts
from ..database.models import Workout

logger = logging.getLogger(__name__)

MAX_ROWS = 5


def describe_workout(workout: Workout) -> str:
    """One-line summary, e.g. ``"Mon 14:05  10 x 30/30s  done"``."""
    when = workout.start_time.strftime("%a %H:%M")
    shape = f"{workout.total_sets} x {workout.work_seconds}/{workout.rest_seconds}s"
    if workout.completed:
        status = "done"
    elif workout.end_time is None:
        status = "in progress"
    else:
        status = f"stopped at {workout.sets_completed}/{workout.total_sets}"
    return f"{when}  {shape}  {status}"


class WorkoutHistoryWidget(QWidget):
    """Displays the most recent workouts from the log."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._row_labels: list[QLabel] = []
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(4)

        header = QLabel("Recent workouts", self)
        header.setObjectName("sectionLabel")
        layout.addWidget(header)

        self._rows = QVBoxLayout()
        self._rows.setSpacing(2)
        layout.addLayout(self._rows)

        self._empty_label = QLabel("No workouts yet.", self)
        self._empty_label.setObjectName("historyRow")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignLeft)
        layout.addWidget(self._empty_label)

    def refresh(self) -> None:
        """Reload from the database.  A failed query keeps the old rows."""
        try:
            workouts = recent_workouts(MAX_ROWS)
        except Exception:
            logger.warning("Could not load workout history", exc_info=True)
            return

        for label in self._row_labels:
            self._rows.removeWidget(label)
            label.deleteLater()
        self._row_labels = []

        for workout in workouts:
            label = QLabel(describe_workout(workout), self)
            label.setObjectName("historyRow")
            self._rows.addWidget(label)
            self._row_labels.append(label)

        self._empty_label.setVisible(not workouts)

    @property
    def row_texts(self) -> list[str]:
        return [label.text() for label in self._row_labels]
