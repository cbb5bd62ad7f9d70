"""Shared test helpers for IntervalTimer."""

from intervaltimer.timer.engine import WorkoutSession
from intervaltimer.timer.phases import Phase


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeCuePlayer:
    """Stands in for CuePlayer where real audio isn't the point."""

    def __init__(self):
        self.played: list = []
        self.volume = 80
        self.enabled = True
        self.stopped = 0

    def play_cue(self, cue):
        self.played.append(cue)

    def set_volume(self, level):
        self.volume = level

    def set_enabled(self, enabled):
        self.enabled = enabled

    def stop_all(self):
        self.stopped += 1


def tick(session: WorkoutSession, count: int = 1) -> None:
    """Deliver *count* clock ticks without waiting for real seconds."""
    for _ in range(count):
        session._on_tick()


def tick_until(session: WorkoutSession, phase: Phase, limit: int = 20000) -> int:
    """Tick until *phase* is reached; returns the number of ticks taken."""
    for n in range(1, limit + 1):
        session._on_tick()
        if session.phase == phase:
            return n
    raise AssertionError(f"never reached {phase} in {limit} ticks")
