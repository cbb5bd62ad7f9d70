"""UI package."""

from .timer_widget import TimerWidget
from .progress_ring import ProgressRing
from .settings_panel import SettingsPanel
from .workout_history import WorkoutHistoryWidget

__all__ = [
    "TimerWidget",
    "ProgressRing",
    "SettingsPanel",
    "WorkoutHistoryWidget",
]
