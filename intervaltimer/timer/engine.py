"""Qt side of the interval timer: the one-second clock and the session.

``WorkoutSession`` owns the configuration and the timer state, routes the
UI commands through the pure reducer in ``phases.py``, and re-emits the
resulting cues as signals.  Nothing here plays audio or touches the
settings file directly; the app wires those to the signals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from . import phases
from .phases import (
    Phase,
    TimerState,
    WorkoutConfig,
    MIN_PHASE_SECONDS,
    MAX_PHASE_SECONDS,
)

logger = logging.getLogger(__name__)


TICK_INTERVAL_MS = 1000

LOCKED_MESSAGE = "Stop and reset to change settings."

# SettingsChange.reason values
REASON_APPLIED = "applied"
REASON_UNCHANGED = "unchanged"
REASON_LOCKED = "locked"
REASON_INVALID = "invalid"
REASON_CANCELLED = "cancelled"


def clamped_message(max_sets: int) -> str:
    return f"Max sets for 3 hours is {max_sets}. Value adjusted."


# ── result / snapshot types ───────────────────────────────────────────────


@dataclass(frozen=True)
class SettingsChange:
    """What happened to a settings request, for the UI to report."""

    accepted: bool
    reason: str
    config: WorkoutConfig
    clamped_sets: int | None = None
    message: str | None = None

    @property
    def changed(self) -> bool:
        return self.reason == REASON_APPLIED


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the UI needs to render one frame."""

    phase: Phase
    seconds_remaining: int
    current_set: int
    total_sets: int
    progress: float
    locked: bool
    minutes_remaining: int
    is_running: bool


# ── clock ─────────────────────────────────────────────────────────────────


class PhaseClock(QObject):
    """One-second ticker.

    ``start`` is idempotent and ``stop`` takes effect immediately: a
    timeout that was already queued when ``stop`` ran is dropped.
    """

    ticked = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._active = False
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_timeout)

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        if self._active:
            return
        self._active = True
        self._qt_timer.start()

    def stop(self) -> None:
        self._active = False
        self._qt_timer.stop()

    def _on_timeout(self) -> None:
        if not self._active:
            return
        self.ticked.emit()


# ── session ───────────────────────────────────────────────────────────────


class WorkoutSession(QObject):
    """The single source of truth for one interval workout.

    Signals
    -------
    state_changed(snapshot: SessionSnapshot)
        Emitted after every command or tick that changes the timer state.
    cue(cue: Cue)
        One emission per cue, in order, for the audio layer.
    config_changed(config: WorkoutConfig)
        Emitted after a settings change is applied.  Persist on this.
    notice(message: str)
        User-facing advisory (locked settings, clamped set count).
    workout_finished(data: dict)
        Emitted when a workout reaches DONE.  Keys: ``sets``,
        ``work_seconds``, ``rest_seconds``, ``start_time``, ``end_time``.
    """

    state_changed = pyqtSignal(object)
    cue = pyqtSignal(object)
    config_changed = pyqtSignal(object)
    notice = pyqtSignal(str)
    workout_finished = pyqtSignal(object)

    def __init__(
        self,
        config: WorkoutConfig | None = None,
        parent: QObject | None = None,
        *,
        db_enabled: bool = True,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        requested = config or WorkoutConfig()
        self._config: WorkoutConfig = phases.sanitize_config(requested)
        if self._config != requested:
            logger.warning("Adjusted workout config %s to %s", requested, self._config)
        self._state: TimerState = phases.idle_state(self._config)
        self._db_enabled = db_enabled

        self._start_time: datetime | None = None
        self._db_workout_id: int | None = None

        self._clock = PhaseClock(self, interval_ms=interval_ms)
        self._clock.ticked.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def config(self) -> WorkoutConfig:
        return self._config

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def seconds_remaining(self) -> int:
        return self._state.seconds_remaining

    @property
    def current_set(self) -> int:
        return self._state.current_set

    @property
    def total_sets(self) -> int:
        return self._config.total_sets

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def locked(self) -> bool:
        return phases.is_locked(self._state)

    @property
    def progress(self) -> float:
        return phases.progress(self._state, self._config)

    @property
    def minutes_remaining(self) -> int:
        return phases.minutes_remaining(self._state, self._config)

    @property
    def clock(self) -> PhaseClock:
        return self._clock

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._state.phase,
            seconds_remaining=self._state.seconds_remaining,
            current_set=self._state.current_set,
            total_sets=self._config.total_sets,
            progress=self.progress,
            locked=self.locked,
            minutes_remaining=self.minutes_remaining,
            is_running=self._state.is_running,
        )

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start from IDLE or resume after a pause.  No-op when running or DONE."""
        was_idle = self._state.phase == Phase.IDLE
        transition = phases.start(self._state, self._config)
        if transition.state == self._state:
            return
        if was_idle:
            self._begin_workout()
        self._apply(transition)
        self._clock.start()

    def pause(self) -> None:
        """Freeze the countdown.  Phase, seconds and set are kept."""
        self._clock.stop()
        if not self._state.is_running:
            return
        self._set_state(phases.pause(self._state))

    def reset(self) -> None:
        """Back to IDLE on set 1, from any phase."""
        self._clock.stop()
        if self._state.is_active:
            self._persist_finished(completed=False)
        self._db_workout_id = None
        self._start_time = None
        self._set_state(phases.reset(self._config))

    # ══════════════════════════════════════════════════════════════════
    #  SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def set_work_seconds(self, seconds: int | None) -> SettingsChange:
        if not self._is_valid_input(seconds, phases.is_valid_phase_seconds):
            return self._invalid_or_cancelled(
                seconds,
                f"Work must be {MIN_PHASE_SECONDS}-{MAX_PHASE_SECONDS} seconds.",
            )
        return self._change(work_seconds=seconds)

    def set_rest_seconds(self, seconds: int | None) -> SettingsChange:
        if not self._is_valid_input(seconds, phases.is_valid_phase_seconds):
            return self._invalid_or_cancelled(
                seconds,
                f"Rest must be {MIN_PHASE_SECONDS}-{MAX_PHASE_SECONDS} seconds.",
            )
        return self._change(rest_seconds=seconds)

    def set_total_sets(self, sets: int | None) -> SettingsChange:
        if not self._is_valid_input(sets, phases.is_valid_total_sets):
            return self._invalid_or_cancelled(sets, "Sets must be at least 1.")
        return self._change(total_sets=sets)

    def set_prep_enabled(self, enabled: bool | None) -> SettingsChange:
        if not self._is_valid_input(enabled, lambda v: isinstance(v, bool)):
            return self._invalid_or_cancelled(enabled, "Prep must be on or off.")
        return self._change(prep_enabled=enabled)

    def ensure_unlocked(self) -> bool:
        """False (and a locked notice) while a workout is in progress."""
        if self.locked:
            self._reject_locked()
            return False
        return True

    def max_allowed_sets(self) -> int:
        return phases.max_allowed_sets(
            self._config.work_seconds, self._config.rest_seconds,
        )

    def _is_valid_input(self, value: object, check: Callable[[object], bool]) -> bool:
        return value is not None and check(value)

    def _invalid_or_cancelled(self, value: object, message: str) -> SettingsChange:
        if self.locked:
            return self._reject_locked()
        if value is None:
            return SettingsChange(False, REASON_CANCELLED, self._config)
        return SettingsChange(False, REASON_INVALID, self._config, message=message)

    def _reject_locked(self) -> SettingsChange:
        self.notice.emit(LOCKED_MESSAGE)
        return SettingsChange(
            False, REASON_LOCKED, self._config, message=LOCKED_MESSAGE,
        )

    def _change(self, **changes) -> SettingsChange:
        if self.locked:
            return self._reject_locked()

        candidate = replace(self._config, **changes)
        sets, clamped = phases.clamp_total_sets(
            candidate.total_sets, candidate.work_seconds, candidate.rest_seconds,
        )
        message = None
        if clamped:
            candidate = replace(candidate, total_sets=sets)
            message = clamped_message(sets)

        if candidate == self._config:
            if message:
                self.notice.emit(message)
            return SettingsChange(
                True, REASON_UNCHANGED, self._config,
                clamped_sets=sets if clamped else None, message=message,
            )

        self._config = candidate
        logger.debug("Workout config changed: %s", candidate)
        self.reset()
        self.config_changed.emit(candidate)
        if message:
            self.notice.emit(message)
        return SettingsChange(
            True,
            REASON_APPLIED,
            candidate,
            clamped_sets=sets if clamped else None,
            message=message,
        )

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        transition = phases.tick(self._state, self._config)
        if transition.state == self._state:
            return
        finished = transition.state.phase == Phase.DONE
        if finished:
            self._clock.stop()
        self._apply(transition)
        if finished:
            self._finish_workout()

    def _apply(self, transition: phases.Transition) -> None:
        old_phase = self._state.phase
        self._set_state(transition.state)
        if transition.state.phase != old_phase:
            logger.debug(
                "Phase %s -> %s (set %d)",
                old_phase.value, transition.state.phase.value,
                transition.state.current_set,
            )
        for cue in transition.cues:
            self.cue.emit(cue)

    def _set_state(self, state: TimerState) -> None:
        self._state = state
        self.state_changed.emit(self.snapshot())

    def _begin_workout(self) -> None:
        self._start_time = datetime.now()
        logger.info(
            "Workout started: %d x (%ds work / %ds rest), prep %s",
            self._config.total_sets, self._config.work_seconds,
            self._config.rest_seconds, "on" if self._config.prep_enabled else "off",
        )
        if self._db_enabled:
            self._persist_start()

    def _finish_workout(self) -> None:
        end_time = datetime.now()
        logger.info("Workout finished: %d sets", self._config.total_sets)
        if self._db_enabled:
            self._persist_finished(completed=True, end_time=end_time)
        self.workout_finished.emit({
            "sets": self._config.total_sets,
            "work_seconds": self._config.work_seconds,
            "rest_seconds": self._config.rest_seconds,
            "start_time": self._start_time,
            "end_time": end_time,
        })
        self._db_workout_id = None

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: database persistence
    # ══════════════════════════════════════════════════════════════════

    def _persist_start(self) -> None:
        from ..database.db import get_session
        from ..database.models import Workout

        try:
            with get_session() as db:
                record = Workout(
                    start_time=self._start_time,
                    work_seconds=self._config.work_seconds,
                    rest_seconds=self._config.rest_seconds,
                    total_sets=self._config.total_sets,
                    prep_enabled=self._config.prep_enabled,
                )
                db.add(record)
                db.flush()
                self._db_workout_id = record.id
        except Exception:
            logger.warning("Could not record workout start", exc_info=True)
            self._db_workout_id = None

    def _persist_finished(
        self, *, completed: bool, end_time: datetime | None = None,
    ) -> None:
        if not self._db_enabled or self._db_workout_id is None:
            return
        from ..database.db import get_session
        from ..database.models import Workout

        if completed:
            sets_done = self._config.total_sets
        else:
            sets_done = self._state.current_set - 1

        try:
            with get_session() as db:
                record = db.get(Workout, self._db_workout_id)
                if record:
                    record.end_time = end_time or datetime.now()
                    record.sets_completed = sets_done
                    record.completed = completed
        except Exception:
            logger.warning("Could not record workout end", exc_info=True)
        self._db_workout_id = None
