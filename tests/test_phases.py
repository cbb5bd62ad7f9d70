"""Tests for the pure phase state machine.

Covers: start/resume/pause/reset, the full PREP/WORK/REST/DONE sequence
and its cue timeline, progress and minutes-left, the 3-hour cap helpers.
No Qt involved.
"""

import pytest

from intervaltimer.timer import phases
from intervaltimer.timer.phases import (
    Cue, Phase, TimerState, WorkoutConfig, PREP_SECONDS, MAX_SESSION_SECONDS,
)


def run_workout(config: WorkoutConfig):
    """Start and tick to DONE.  Returns [(t, state, cues), ...] from t=0."""
    transition = phases.start(phases.idle_state(config), config)
    timeline = [(0, transition.state, transition.cues)]
    t = 0
    while transition.state.phase != Phase.DONE:
        t += 1
        transition = phases.tick(transition.state, config)
        timeline.append((t, transition.state, transition.cues))
        assert t < 100000
    return timeline


def segments(timeline):
    """Collapse per-second phases into [(phase, seconds), ...]."""
    out: list[list] = []
    for _, state, _ in timeline:
        if out and out[-1][0] == state.phase:
            out[-1][1] += 1
        else:
            out.append([state.phase, 1])
    return [tuple(s) for s in out]


# ═══════════════════════════════════════════════════════════════════════════
#  START / PAUSE / RESET
# ═══════════════════════════════════════════════════════════════════════════


class TestStart:

    def test_idle_state_defaults(self):
        state = phases.idle_state(WorkoutConfig())
        assert state == TimerState(Phase.IDLE, 30, 1, False)

    def test_start_with_prep_enters_prep_and_beeps(self):
        config = WorkoutConfig(prep_enabled=True)
        result = phases.start(phases.idle_state(config), config)
        assert result.state.phase == Phase.PREP
        assert result.state.seconds_remaining == PREP_SECONDS
        assert result.state.is_running is True
        assert result.cues == (Cue.COUNTDOWN_BEEP,)

    def test_start_without_prep_enters_work(self):
        config = WorkoutConfig(work_seconds=45, prep_enabled=False)
        result = phases.start(phases.idle_state(config), config)
        assert result.state.phase == Phase.WORK
        assert result.state.seconds_remaining == 45
        assert result.cues == (Cue.WORK_START,)

    def test_start_while_running_is_noop(self):
        config = WorkoutConfig()
        running = phases.start(phases.idle_state(config), config).state
        again = phases.start(running, config)
        assert again.state == running
        assert again.cues == ()

    def test_start_from_done_is_noop(self):
        config = WorkoutConfig()
        done = TimerState(Phase.DONE, 0, config.total_sets, False)
        result = phases.start(done, config)
        assert result.state == done
        assert result.cues == ()

    def test_start_after_pause_resumes_without_cue(self):
        config = WorkoutConfig()
        paused = TimerState(Phase.REST, 12, 4, False)
        result = phases.start(paused, config)
        assert result.state == TimerState(Phase.REST, 12, 4, True)
        assert result.cues == ()


class TestPauseAndReset:

    def test_pause_only_clears_running(self):
        state = TimerState(Phase.WORK, 17, 3, True)
        assert phases.pause(state) == TimerState(Phase.WORK, 17, 3, False)

    @pytest.mark.parametrize("state", [
        TimerState(Phase.IDLE, 30, 1, False),
        TimerState(Phase.PREP, 2, 1, True),
        TimerState(Phase.WORK, 10, 5, True),
        TimerState(Phase.REST, 1, 9, False),
        TimerState(Phase.DONE, 0, 10, False),
    ])
    def test_reset_from_any_phase(self, state):
        config = WorkoutConfig(work_seconds=40)
        assert phases.reset(config) == TimerState(Phase.IDLE, 40, 1, False)

    def test_tick_while_paused_changes_nothing(self):
        config = WorkoutConfig()
        paused = TimerState(Phase.WORK, 20, 2, False)
        result = phases.tick(paused, config)
        assert result.state == paused
        assert result.cues == ()

    @pytest.mark.parametrize("phase", [Phase.IDLE, Phase.DONE])
    def test_tick_outside_active_phases_changes_nothing(self, phase):
        config = WorkoutConfig()
        state = TimerState(phase, 0, 1, True)
        assert phases.tick(state, config).state == state


# ═══════════════════════════════════════════════════════════════════════════
#  FULL SEQUENCE
# ═══════════════════════════════════════════════════════════════════════════


class TestSequence:

    CONFIG = WorkoutConfig(work_seconds=30, rest_seconds=30, total_sets=2, prep_enabled=True)

    def test_phase_sequence_with_prep(self):
        assert segments(run_workout(self.CONFIG)) == [
            (Phase.PREP, 3),
            (Phase.WORK, 30),
            (Phase.REST, 30),
            (Phase.PREP, 3),
            (Phase.WORK, 30),
            (Phase.REST, 30),
            (Phase.DONE, 1),
        ]

    def test_cue_timeline_with_prep(self):
        cues = {t: c for t, _, c in run_workout(self.CONFIG) if c}
        assert cues == {
            0: (Cue.COUNTDOWN_BEEP,),
            1: (Cue.COUNTDOWN_BEEP,),
            2: (Cue.COUNTDOWN_BEEP,),
            3: (Cue.WORK_START,),
            33: (Cue.REST_START,),
            63: (Cue.REST_START, Cue.COUNTDOWN_BEEP),
            64: (Cue.COUNTDOWN_BEEP,),
            65: (Cue.COUNTDOWN_BEEP,),
            66: (Cue.WORK_START,),
            96: (Cue.REST_START,),
            126: (Cue.DONE,),
        }

    def test_beeps_sound_at_three_two_one(self):
        beeps = [
            s.seconds_remaining
            for _, s, c in run_workout(self.CONFIG)
            if Cue.COUNTDOWN_BEEP in c
        ]
        assert beeps == [3, 2, 1, 3, 2, 1]

    def test_done_cue_exactly_once(self):
        all_cues = [cue for _, _, c in run_workout(self.CONFIG) for cue in c]
        assert all_cues.count(Cue.DONE) == 1

    def test_done_state(self):
        final = run_workout(self.CONFIG)[-1][1]
        assert final.phase == Phase.DONE
        assert final.seconds_remaining == 0
        assert final.is_running is False
        assert final.current_set == 2

    def test_sequence_without_prep_goes_rest_to_work(self):
        config = WorkoutConfig(work_seconds=5, rest_seconds=4, total_sets=3, prep_enabled=False)
        timeline = run_workout(config)
        assert segments(timeline) == [
            (Phase.WORK, 5), (Phase.REST, 4),
            (Phase.WORK, 5), (Phase.REST, 4),
            (Phase.WORK, 5), (Phase.REST, 4),
            (Phase.DONE, 1),
        ]
        all_cues = [cue for _, _, c in timeline for cue in c]
        assert Cue.COUNTDOWN_BEEP not in all_cues
        assert all_cues.count(Cue.WORK_START) == 3
        assert all_cues.count(Cue.REST_START) == 3

    def test_one_second_phases(self):
        config = WorkoutConfig(work_seconds=1, rest_seconds=1, total_sets=1, prep_enabled=False)
        assert segments(run_workout(config)) == [
            (Phase.WORK, 1), (Phase.REST, 1), (Phase.DONE, 1),
        ]

    @pytest.mark.parametrize("config", [
        WorkoutConfig(30, 30, 2, True),
        WorkoutConfig(7, 3, 4, True),
        WorkoutConfig(1, 300, 3, False),
        WorkoutConfig(300, 1, 2, True),
    ])
    def test_invariants_hold_every_second(self, config):
        for _, state, _ in run_workout(config):
            total = phases.phase_total_seconds(state.phase, config)
            assert 0 <= state.seconds_remaining <= total
            assert 1 <= state.current_set <= config.total_sets
            assert 0.0 <= phases.progress(state, config) <= 1.0

    def test_current_set_increments_after_rest(self):
        timeline = run_workout(self.CONFIG)
        sets = {t: s.current_set for t, s, _ in timeline}
        assert sets[62] == 1   # last second of REST in set 1
        assert sets[63] == 2   # PREP of set 2


# ═══════════════════════════════════════════════════════════════════════════
#  PROGRESS / ESTIMATE
# ═══════════════════════════════════════════════════════════════════════════


class TestProgress:

    CONFIG = WorkoutConfig(work_seconds=40, rest_seconds=20, total_sets=3)

    @pytest.mark.parametrize("phase, total", [
        (Phase.PREP, PREP_SECONDS),
        (Phase.WORK, 40),
        (Phase.REST, 20),
        (Phase.IDLE, 40),
        (Phase.DONE, 40),
    ])
    def test_phase_total_seconds(self, phase, total):
        assert phases.phase_total_seconds(phase, self.CONFIG) == total

    @pytest.mark.parametrize("phase, total", [
        (Phase.PREP, PREP_SECONDS), (Phase.WORK, 40), (Phase.REST, 20),
    ])
    def test_full_at_entry_and_one_over_total_before_transition(self, phase, total):
        entry = TimerState(phase, total, 1, True)
        last = TimerState(phase, 1, 1, True)
        assert phases.progress(entry, self.CONFIG) == 1.0
        assert phases.progress(last, self.CONFIG) == pytest.approx(1 / total)

    def test_progress_is_clamped(self):
        over = TimerState(Phase.WORK, 500, 1, True)
        under = TimerState(Phase.WORK, -3, 1, True)
        assert phases.progress(over, self.CONFIG) == 1.0
        assert phases.progress(under, self.CONFIG) == 0.0

    def test_done_progress_is_zero(self):
        done = TimerState(Phase.DONE, 0, 3, False)
        assert phases.progress(done, self.CONFIG) == 0.0

    def test_non_positive_total_gives_zero(self):
        config = WorkoutConfig(work_seconds=0)
        assert phases.progress(phases.idle_state(config), config) == 0.0

    def test_minutes_remaining_idle_defaults(self):
        config = WorkoutConfig()
        # 9 more sets of 60 s plus the 30 s showing now = 570 s
        assert phases.minutes_remaining(phases.idle_state(config), config) == 10

    def test_minutes_remaining_rounds_up(self):
        state = TimerState(Phase.REST, 1, 3, True)
        assert phases.minutes_remaining(state, self.CONFIG) == 1

    def test_minutes_remaining_done_is_zero(self):
        done = TimerState(Phase.DONE, 0, 3, False)
        assert phases.minutes_remaining(done, self.CONFIG) == 0


# ═══════════════════════════════════════════════════════════════════════════
#  LOCK + CAP HELPERS
# ═══════════════════════════════════════════════════════════════════════════


class TestLockAndCap:

    @pytest.mark.parametrize("state, locked", [
        (TimerState(Phase.IDLE, 30, 1, False), False),
        (TimerState(Phase.DONE, 0, 10, False), False),
        (TimerState(Phase.PREP, 3, 1, True), True),
        (TimerState(Phase.WORK, 10, 1, False), True),
        (TimerState(Phase.REST, 10, 1, False), True),
    ])
    def test_is_locked(self, state, locked):
        assert phases.is_locked(state) is locked

    @pytest.mark.parametrize("work, rest, expected", [
        (300, 300, 18),
        (30, 30, 180),
        (1, 1, 5400),
        (0, 0, 1),
    ])
    def test_max_allowed_sets(self, work, rest, expected):
        assert phases.max_allowed_sets(work, rest) == expected

    def test_clamp_total_sets(self):
        assert phases.clamp_total_sets(20, 300, 300) == (18, True)
        assert phases.clamp_total_sets(18, 300, 300) == (18, False)

    def test_max_sets_respect_cap(self):
        for work in (1, 7, 59, 120, 300):
            for rest in (1, 13, 60, 300):
                sets = phases.max_allowed_sets(work, rest)
                assert sets * (work + rest) <= MAX_SESSION_SECONDS

    @pytest.mark.parametrize("value, valid", [
        (1, True), (300, True), (0, False), (301, False),
        (True, False), ("30", False), (30.0, False), (None, False),
    ])
    def test_is_valid_phase_seconds(self, value, valid):
        assert phases.is_valid_phase_seconds(value) is valid
