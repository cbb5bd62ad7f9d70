"""Timer package."""

from .phases import (
    Phase,
    Cue,
    TimerState,
    WorkoutConfig,
    Transition,
    PREP_SECONDS,
    MAX_SESSION_SECONDS,
)
from .engine import (
    WorkoutSession,
    PhaseClock,
    SessionSnapshot,
    SettingsChange,
)

__all__ = [
    "Phase",
    "Cue",
    "TimerState",
    "WorkoutConfig",
    "Transition",
    "PREP_SECONDS",
    "MAX_SESSION_SECONDS",
    "WorkoutSession",
    "PhaseClock",
    "SessionSnapshot",
    "SettingsChange",
]
