"""Cue synthesis and playback using numpy + QSoundEffect.

All cues are generated programmatically as WAV files using sine-wave
synthesis with ADSR envelopes.  Files are cached to disk so subsequent
launches skip the synthesis.

Cues
----
- ``work-start``:      bright ascending chime
- ``rest-start``:      soft bell
- ``countdown-beep``:  short high beep (3, 2, 1 during PREP)
- ``done``:            celebratory arpeggio

Channels
--------
``work-start``, ``rest-start`` and ``done`` share the *main* channel: a
new main cue stops whichever main cue is still sounding.  The countdown
beep has its own channel and is stopped and restarted on every beep, so
back-to-back beeps never overlap.
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..timer.phases import Cue

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "IntervalTimer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

CUE_NAMES = tuple(cue.value for cue in Cue)

MAIN_CHANNEL = frozenset({Cue.WORK_START, Cue.REST_START, Cue.DONE})

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _envelope(n: int, attack_s: float, release_s: float, sustain: float = 0.6) -> np.ndarray:
    """Attack / decay-to-sustain / release envelope over *n* samples.

    Built from breakpoints with ``np.interp``; the decay takes whatever is
    left between the attack and the release.
    """
    if n <= 0:
        return np.zeros(0)
    a = min(int(SAMPLE_RATE * attack_s), n)
    r_start = max(a, n - int(SAMPLE_RATE * release_s))
    d_end = a + (r_start - a) // 3
    points = [min(p, n - 1) for p in (0, a, d_end, r_start, n - 1)]
    levels = [0.0, 1.0, sustain, sustain, 0.0]
    return np.interp(np.arange(n), points, levels)


def _tone(
    freq: float,
    duration_s: float,
    *,
    gain: float = 0.5,
    overtone: float = 0.0,
    attack_s: float = 0.004,
    release_s: float = 0.05,
    sustain: float = 0.6,
) -> np.ndarray:
    """Enveloped sine at *freq* with an optional octave overtone."""
    t = np.arange(int(SAMPLE_RATE * duration_s)) / SAMPLE_RATE
    wave_ = np.sin(2 * np.pi * freq * t) + overtone * np.sin(4 * np.pi * freq * t)
    return gain * wave_ * _envelope(len(t), attack_s, release_s, sustain)


def _sequence(notes: list[tuple[float, float]], gap_s: float, **tone_kw) -> np.ndarray:
    """Notes ``(freq, duration)`` back to back with *gap_s* of silence between."""
    gap = np.zeros(int(SAMPLE_RATE * gap_s))
    parts: list[np.ndarray] = []
    for freq, duration in notes:
        parts.extend((_tone(freq, duration, **tone_kw), gap))
    return np.concatenate(parts)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Mono 16-bit PCM WAV from float samples in -1..1."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


def _generate_work_start() -> bytes:
    """Rising E-major triad, short and punchy."""
    notes = [(659.25, 0.11), (830.61, 0.11), (987.77, 0.16)]
    return _to_wav_bytes(_sequence(notes, 0.02, gain=0.7, overtone=0.15))


def _generate_rest_start() -> bytes:
    """Soft A4 bell with a long tail."""
    bell = _tone(440.0, 0.9, gain=0.4, overtone=0.25,
                 attack_s=0.02, release_s=0.5, sustain=0.3)
    return _to_wav_bytes(bell)


def _generate_countdown_beep() -> bytes:
    """120 ms at 1 kHz; the attack is near-instant so it lands on the second."""
    return _to_wav_bytes(_tone(1000.0, 0.12, gain=0.6, attack_s=0.001, release_s=0.02))


def _generate_done() -> bytes:
    """C-major arpeggio up to C6, last note held."""
    run = _sequence([(523.25, 0.12), (659.25, 0.12), (783.99, 0.12)], 0.025, gain=0.5)
    held = _tone(1046.50, 0.45, gain=0.5, overtone=0.15, release_s=0.2)
    return _to_wav_bytes(np.concatenate([run, held]))


_GENERATORS: dict[Cue, callable] = {
    Cue.WORK_START: _generate_work_start,
    Cue.REST_START: _generate_rest_start,
    Cue.COUNTDOWN_BEEP: _generate_countdown_beep,
    Cue.DONE: _generate_done,
}


# ═══════════════════════════════════════════════════════════════════════════
#  CUE PLAYER
# ═══════════════════════════════════════════════════════════════════════════


class CuePlayer(QObject):
    """Plays workout cues.  Fire-and-forget: never raises to the caller.

    Usage::

        player = CuePlayer(parent=self)
        player.set_volume(80)
        session.cue.connect(player.play_cue)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.8  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[Cue, QSoundEffect] = {}

        try:
            self._ensure_wav_files()
        except OSError:
            logger.warning("Could not write cue files to %s", self._sounds_dir, exc_info=True)
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not enabled:
            self.stop_all()

    def play_cue(self, cue: Cue | str) -> None:
        """Play *cue* (a ``Cue`` or its name).  No-op if disabled or unknown."""
        if not self._enabled:
            return
        try:
            cue = Cue(cue)
        except ValueError:
            logger.debug("Unknown cue %r", cue)
            return
        effect = self._effects.get(cue)
        if effect is None:
            return
        try:
            if cue in MAIN_CHANNEL:
                for other in MAIN_CHANNEL:
                    playing = self._effects.get(other)
                    if playing is not None:
                        playing.stop()
            else:
                effect.stop()
            effect.play()
        except Exception:
            logger.warning("Failed to play cue %s", cue.value, exc_info=True)

    def stop_all(self) -> None:
        for effect in self._effects.values():
            effect.stop()

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for cue, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{cue.value}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for cue in Cue:
            path = self._sounds_dir / f"{cue.value}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[cue] = effect
