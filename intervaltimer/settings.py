"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/IntervalTimer/settings.json

Usage::

    settings = load_settings()
    settings.sound_volume = 50
    save_settings(settings)

Every field falls back to its default on its own, so a partial or
hand-edited file still loads.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .timer.phases import (
    WorkoutConfig,
    DEFAULT_WORK_SECONDS,
    DEFAULT_REST_SECONDS,
    DEFAULT_TOTAL_SETS,
    DEFAULT_PREP_ENABLED,
    clamp_total_sets,
    is_valid_phase_seconds,
    is_valid_total_sets,
)

logger = logging.getLogger(__name__)


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "IntervalTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── workout ───────────────────────────────────────────────────────
    work_seconds: int = DEFAULT_WORK_SECONDS
    rest_seconds: int = DEFAULT_REST_SECONDS
    total_sets: int = DEFAULT_TOTAL_SETS
    prep_enabled: bool = DEFAULT_PREP_ENABLED

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 80                 # 0-100

    def workout_config(self) -> WorkoutConfig:
        return WorkoutConfig(
            work_seconds=self.work_seconds,
            rest_seconds=self.rest_seconds,
            total_sets=self.total_sets,
            prep_enabled=self.prep_enabled,
        )

    def apply_workout_config(self, config: WorkoutConfig) -> None:
        self.work_seconds = config.work_seconds
        self.rest_seconds = config.rest_seconds
        self.total_sets = config.total_sets
        self.prep_enabled = config.prep_enabled


# ── per-field validation for stored values ────────────────────────────────

_VALIDATORS = {
    "work_seconds": is_valid_phase_seconds,
    "rest_seconds": is_valid_phase_seconds,
    "total_sets": is_valid_total_sets,
    "prep_enabled": lambda v: isinstance(v, bool),
    "sound_enabled": lambda v: isinstance(v, bool),
    "sound_volume": lambda v: isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 100,
}


# ── persistence ───────────────────────────────────────────────────────────


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults field by field."""
    data: dict = {}
    try:
        if SETTINGS_PATH.exists():
            raw = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            if isinstance(raw, dict):
                data = raw
            else:
                logger.warning("Ignoring settings file %s: not an object", SETTINGS_PATH)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read settings from %s: %s", SETTINGS_PATH, exc)

    valid_keys = {f.name for f in fields(Settings)}
    filtered = {}
    for key, value in data.items():
        if key not in valid_keys:
            continue
        if _VALIDATORS[key](value):
            filtered[key] = value
        else:
            logger.warning("Ignoring invalid setting %s=%r", key, value)

    settings = Settings(**filtered)
    settings.total_sets, clamped = clamp_total_sets(
        settings.total_sets, settings.work_seconds, settings.rest_seconds,
    )
    if clamped:
        logger.info("Stored set count exceeds the 3-hour cap; using %d", settings.total_sets)
    return settings


def save_settings(settings: Settings) -> bool:
    """Write settings to disk as JSON.  Returns False (and logs) on failure."""
    try:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        SETTINGS_PATH.write_text(
            json.dumps(asdict(settings), indent=2) + "\n",
            encoding="utf-8",
        )
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Could not save settings to %s: %s", SETTINGS_PATH, exc)
        return False
    return True
