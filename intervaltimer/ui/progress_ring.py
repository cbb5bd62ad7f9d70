"""Circular countdown ring rendered with QPainter.

The arc is full when a phase begins and empties clockwise as it counts
down.  Colours follow the phase and grey out while paused.  Small marks
around the outside show how many sets are finished.
"""

from __future__ import annotations

import math

from PyQt6.QtCore import Qt, QRectF, QPointF, QVariantAnimation, QEasingCurve
from PyQt6.QtGui import QPainter, QPen, QColor, QConicalGradient, QFont
from PyQt6.QtWidgets import QWidget

from ..timer.phases import Phase
from .styles import PHASE_COLORS, PAUSED_COLORS

# Above this many sets the marks would touch; draw none.
MAX_SET_MARKS = 60


class ProgressRing(QWidget):
    """Custom-painted countdown ring with the remaining time at its centre."""

    RING_DIAMETER = 200
    RING_THICKNESS = 14

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(self.RING_DIAMETER + 20, self.RING_DIAMETER + 20)

        self._fraction = 1.0
        self._display_fraction = 1.0
        self._time_text = ""
        self._phase = Phase.IDLE
        self._paused = False
        self._sets_done = 0
        self._total_sets = 0
        self._colors = tuple(QColor(c) for c in PHASE_COLORS[Phase.IDLE])

        self._arc_anim = QVariantAnimation(self)
        self._arc_anim.setDuration(250)
        self._arc_anim.setEasingCurve(QEasingCurve.Type.OutCubic)
        self._arc_anim.valueChanged.connect(self._on_arc_anim)

    # ── public API ────────────────────────────────────────────────────

    @property
    def fraction(self) -> float:
        return self._fraction

    @property
    def time_text(self) -> str:
        return self._time_text

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def paused(self) -> bool:
        return self._paused

    def set_fraction(self, fraction: float) -> None:
        """Arc fill in 0..1.  Jumps up on phase entry, eases down between ticks."""
        fraction = max(0.0, min(1.0, fraction))
        self._fraction = fraction
        self._arc_anim.stop()
        if fraction >= self._display_fraction:
            self._display_fraction = fraction
            self.update()
            return
        self._arc_anim.setStartValue(self._display_fraction)
        self._arc_anim.setEndValue(fraction)
        self._arc_anim.start()

    def set_time_text(self, text: str) -> None:
        self._time_text = text
        self.update()

    def set_sets(self, done: int, total: int) -> None:
        self._sets_done = max(0, min(done, total))
        self._total_sets = max(0, total)
        self.update()

    def apply_phase(self, phase: Phase, *, paused: bool = False) -> None:
        if phase == self._phase and paused == self._paused:
            return
        self._phase = phase
        self._paused = paused
        pair = PAUSED_COLORS if paused else PHASE_COLORS[phase]
        self._colors = tuple(QColor(c) for c in pair)
        self.update()

    def _on_arc_anim(self, value: object) -> None:
        self._display_fraction = float(value)  # type: ignore[arg-type]
        self.update()

    # ── painting ──────────────────────────────────────────────────────

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        cx, cy = self.width() / 2, self.height() / 2
        diameter = max(100, min(self.width(), self.height()) - 20)
        radius = diameter / 2
        rect = QRectF(cx - radius, cy - radius, diameter, diameter)
        primary, secondary = self._colors

        painter.setPen(QPen(QColor(255, 255, 255, 30), self.RING_THICKNESS))
        painter.drawEllipse(rect)

        if self._display_fraction > 0.001:
            gradient = QConicalGradient(cx, cy, 90)
            gradient.setColorAt(0.0, primary)
            gradient.setColorAt(0.5, secondary)
            gradient.setColorAt(1.0, primary)
            pen = QPen(gradient, self.RING_THICKNESS)
            pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            painter.setPen(pen)
            # 12 o'clock, clockwise; Qt angles are in 1/16 degree
            painter.drawArc(rect, 90 * 16, -int(self._display_fraction * 360 * 16))

        if 0 < self._total_sets <= MAX_SET_MARKS:
            mark_radius = radius + self.RING_THICKNESS / 2 + 5
            painter.setPen(Qt.PenStyle.NoPen)
            for i in range(self._total_sets):
                angle = math.radians(90 - 360 * i / self._total_sets)
                centre = QPointF(
                    cx + math.cos(angle) * mark_radius,
                    cy - math.sin(angle) * mark_radius,
                )
                painter.setBrush(primary if i < self._sets_done else QColor(255, 255, 255, 40))
                painter.drawEllipse(centre, 2.5, 2.5)

        font = QFont()
        font.setPixelSize(56)
        font.setWeight(QFont.Weight.ExtraBold)
        painter.setFont(font)
        painter.setPen(QColor("#FFFFFF"))
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, self._time_text)

        painter.end()
