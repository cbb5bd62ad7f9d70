"""Phase state machine for IntervalTimer.

Phases
------
IDLE    Waiting for the user to start.
PREP    Fixed 3-second "get ready" countdown before each WORK phase.
WORK    Work interval counting down.
REST    Rest interval counting down.
DONE    All sets finished.  Terminal until reset.

Transitions (one ``tick`` per elapsed second)
---------------------------------------------
IDLE → PREP | WORK                 (start; PREP only when prep is enabled)
PREP → WORK                        (PREP reaches 0)
WORK → REST                        (WORK reaches 0)
REST → PREP | WORK                 (REST reaches 0, more sets to go)
REST → DONE                        (REST reaches 0 on the last set)
Any  → IDLE                        (reset)

Everything here is pure: each function takes a state and a config and
returns a new state plus the cues to play.  The Qt side lives in
``engine.py``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    IDLE = "idle"
    PREP = "prep"
    WORK = "work"
    REST = "rest"
    DONE = "done"


class Cue(Enum):
    WORK_START = "work-start"
    REST_START = "rest-start"
    COUNTDOWN_BEEP = "countdown-beep"
    DONE = "done"


# ── constants ─────────────────────────────────────────────────────────────

PREP_SECONDS = 3
MIN_PHASE_SECONDS = 1
MAX_PHASE_SECONDS = 300
MAX_SESSION_SECONDS = 3 * 60 * 60  # 10800

DEFAULT_WORK_SECONDS = 30
DEFAULT_REST_SECONDS = 30
DEFAULT_TOTAL_SETS = 10
DEFAULT_PREP_ENABLED = True

ACTIVE_PHASES = frozenset({Phase.PREP, Phase.WORK, Phase.REST})


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class WorkoutConfig:
    """User-tunable workout parameters."""

    work_seconds: int = DEFAULT_WORK_SECONDS
    rest_seconds: int = DEFAULT_REST_SECONDS
    total_sets: int = DEFAULT_TOTAL_SETS
    prep_enabled: bool = DEFAULT_PREP_ENABLED

    @property
    def seconds_per_set(self) -> int:
        return self.work_seconds + self.rest_seconds

    @property
    def total_seconds(self) -> int:
        return self.total_sets * self.seconds_per_set


@dataclass(frozen=True)
class TimerState:
    phase: Phase = Phase.IDLE
    seconds_remaining: int = DEFAULT_WORK_SECONDS
    current_set: int = 1
    is_running: bool = False

    @property
    def is_active(self) -> bool:
        return self.phase in ACTIVE_PHASES


@dataclass(frozen=True)
class Transition:
    """Result of applying one command or tick: the new state plus cues."""

    state: TimerState
    cues: tuple[Cue, ...] = ()


# ── derived values ────────────────────────────────────────────────────────


def phase_total_seconds(phase: Phase, config: WorkoutConfig) -> int:
    """Full length of *phase*.  IDLE and DONE display the work length."""
    if phase == Phase.PREP:
        return PREP_SECONDS
    if phase == Phase.REST:
        return config.rest_seconds
    return config.work_seconds


def progress(state: TimerState, config: WorkoutConfig) -> float:
    """1.0 at phase entry, down to 0.0 when the phase runs out."""
    total = phase_total_seconds(state.phase, config)
    if total <= 0:
        return 0.0
    clamped = max(0, min(state.seconds_remaining, total))
    return clamped / total


def minutes_remaining(state: TimerState, config: WorkoutConfig) -> int:
    """Rough whole-minute estimate of the time left in the workout."""
    remaining_sets = max(0, min(config.total_sets - state.current_set, config.total_sets))
    seconds = remaining_sets * config.seconds_per_set + state.seconds_remaining
    return math.ceil(seconds / 60)


def is_locked(state: TimerState) -> bool:
    """Settings can't change while a workout is in progress."""
    return state.is_running or state.is_active


# ── settings validation ───────────────────────────────────────────────────


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_phase_seconds(value: object) -> bool:
    """True for an int within 1..300."""
    return _is_int(value) and MIN_PHASE_SECONDS <= value <= MAX_PHASE_SECONDS


def is_valid_total_sets(value: object) -> bool:
    return _is_int(value) and value >= 1


def max_allowed_sets(work_seconds: int, rest_seconds: int) -> int:
    """Most sets that fit in the 3-hour cap (never less than 1)."""
    per_set = work_seconds + rest_seconds
    if per_set <= 0:
        return 1
    return max(1, MAX_SESSION_SECONDS // per_set)


def clamp_total_sets(
    total_sets: int, work_seconds: int, rest_seconds: int,
) -> tuple[int, bool]:
    """Return ``(sets, clamped)`` with *sets* pulled under the 3-hour cap."""
    limit = max_allowed_sets(work_seconds, rest_seconds)
    if total_sets > limit:
        return limit, True
    return total_sets, False


def sanitize_config(config: WorkoutConfig) -> WorkoutConfig:
    """Out-of-range fields fall back to their defaults; sets are clamped to the cap."""
    work = config.work_seconds if is_valid_phase_seconds(config.work_seconds) else DEFAULT_WORK_SECONDS
    rest = config.rest_seconds if is_valid_phase_seconds(config.rest_seconds) else DEFAULT_REST_SECONDS
    sets = config.total_sets if is_valid_total_sets(config.total_sets) else DEFAULT_TOTAL_SETS
    prep = config.prep_enabled if isinstance(config.prep_enabled, bool) else DEFAULT_PREP_ENABLED
    sets, _ = clamp_total_sets(sets, work, rest)
    return WorkoutConfig(work, rest, sets, prep)


# ── commands ──────────────────────────────────────────────────────────────


def idle_state(config: WorkoutConfig) -> TimerState:
    return TimerState(
        phase=Phase.IDLE,
        seconds_remaining=config.work_seconds,
        current_set=1,
        is_running=False,
    )


def reset(config: WorkoutConfig) -> TimerState:
    """Back to IDLE on set 1, from any phase (DONE included)."""
    return idle_state(config)


def start(state: TimerState, config: WorkoutConfig) -> Transition:
    """Start from IDLE, or resume a paused phase.

    Starting while running is a no-op, and so is starting from DONE.
    """
    if state.is_running or state.phase == Phase.DONE:
        return Transition(state)

    if state.is_active:
        # Paused mid-phase: pick up exactly where we left off.
        return Transition(replace(state, is_running=True))

    if config.prep_enabled:
        # The "3" beep sounds right away; "2" and "1" come from ticks.
        return Transition(
            replace(
                state,
                phase=Phase.PREP,
                seconds_remaining=PREP_SECONDS,
                is_running=True,
            ),
            (Cue.COUNTDOWN_BEEP,),
        )
    return Transition(
        replace(
            state,
            phase=Phase.WORK,
            seconds_remaining=config.work_seconds,
            is_running=True,
        ),
        (Cue.WORK_START,),
    )


def pause(state: TimerState) -> TimerState:
    return replace(state, is_running=False)


def tick(state: TimerState, config: WorkoutConfig) -> Transition:
    """Advance one second."""
    if not state.is_running or not state.is_active:
        return Transition(state)

    seconds = state.seconds_remaining - 1

    if state.phase == Phase.PREP:
        if seconds <= 0:
            return _enter_work(state, config)
        cues = (Cue.COUNTDOWN_BEEP,) if seconds <= 2 else ()
        return Transition(replace(state, seconds_remaining=seconds), cues)

    if seconds > 0:
        return Transition(replace(state, seconds_remaining=seconds))

    if state.phase == Phase.WORK:
        return Transition(
            replace(state, phase=Phase.REST, seconds_remaining=config.rest_seconds),
            (Cue.REST_START,),
        )

    # REST ran out: that set is finished.
    next_set = state.current_set + 1
    if next_set > config.total_sets:
        # DONE stays on the last set rather than pointing past it.
        return Transition(
            TimerState(
                phase=Phase.DONE,
                seconds_remaining=0,
                current_set=config.total_sets,
                is_running=False,
            ),
            (Cue.DONE,),
        )
    state = replace(state, current_set=next_set)
    if config.prep_enabled:
        # Both cues fire together: the rest alert and the opening "3" beep.
        return Transition(
            replace(state, phase=Phase.PREP, seconds_remaining=PREP_SECONDS),
            (Cue.REST_START, Cue.COUNTDOWN_BEEP),
        )
    return _enter_work(state, config)


def _enter_work(state: TimerState, config: WorkoutConfig) -> Transition:
    return Transition(
        replace(state, phase=Phase.WORK, seconds_remaining=config.work_seconds),
        (Cue.WORK_START,),
    )
