"""IntervalTimer: WORK/REST interval timer with prep countdown and audio cues."""

__version__ = "0.1.0"
