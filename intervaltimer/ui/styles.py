"""QSS stylesheet, palette, and phase colors for IntervalTimer."""

from __future__ import annotations

from ..timer.phases import Phase

# ── phase colors (ring gradient pairs) ──────────────────────────────────
#    Each phase maps to (primary, secondary) for the conical gradient.

PHASE_COLORS: dict[Phase, tuple[str, str]] = {
    Phase.IDLE: ("#82B1FF", "#5C8DFF"),   # blue
    Phase.PREP: ("#FFD740", "#FFC400"),   # amber
    Phase.WORK: ("#00E676", "#00C853"),   # green
    Phase.REST: ("#64FFDA", "#1DE9B6"),   # teal
    Phase.DONE: ("#EA80FC", "#E040FB"),   # purple
}

PAUSED_COLORS: tuple[str, str] = ("#6C7086", "#585B70")

PHASE_LABELS: dict[Phase, str] = {
    Phase.IDLE: "Ready",
    Phase.PREP: "Get Ready",
    Phase.WORK: "WORK",
    Phase.REST: "REST",
    Phase.DONE: "Done",
}

# ── palette ───────────────────────────────────────────────────────────────

PALETTE: dict[str, str] = {
    "bg":           "#0F1624",
    "bg_secondary": "#18213A",
    "surface":      "#222C48",
    "accent":       "#82B1FF",
    "text":         "#FFFFFF",
    "text_muted":   "#8A93AD",
    "warning":      "#FFB74D",
    "danger":       "#FF5252",
    "border":       "#2A3556",
}


def format_time(total_seconds: int) -> str:
    """``S`` under a minute, ``M:SS`` otherwise."""
    minutes, seconds = divmod(max(0, total_seconds), 60)
    if minutes == 0:
        return str(seconds)
    return f"{minutes}:{seconds:02d}"


# ── font resolution ───────────────────────────────────────────────────

_resolved_font: str | None = None


def resolve_font_family() -> str:
    """Detect the best available system font.  Must be called after
    QApplication is created (font database needs the app context)."""
    global _resolved_font
    if _resolved_font is None:
        from PyQt6.QtGui import QFontDatabase
        families = set(QFontDatabase.families())
        for candidate in ("SF Pro", ".AppleSystemUIFont", "Inter", "Noto Sans"):
            if candidate in families:
                _resolved_font = candidate
                break
        else:
            _resolved_font = "Helvetica Neue"
    return _resolved_font


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    font = resolve_font_family()
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "{font}", "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 12px;
        padding: 12px 20px;
        font-size: 16px;
        font-weight: 700;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton:disabled {{
        color: {p['text_muted']};
        border-color: {p['border']};
    }}

    QPushButton#startButton {{
        background-color: {p['accent']};
        color: #000000;
        border: none;
    }}

    QPushButton#pauseButton {{
        background-color: {p['warning']};
        color: #FFFFFF;
        border: none;
    }}

    QPushButton#settingButton {{
        text-align: left;
        font-size: 14px;
        font-weight: 600;
        padding: 12px 14px;
    }}

    /* ── frame / card ────────────────────────────── */
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 18px;
    }}

    /* ── labels ──────────────────────────────────── */
    QLabel#phaseLabel {{
        font-size: 32px;
        font-weight: 700;
        letter-spacing: 1px;
    }}

    QLabel#setLabel {{
        font-size: 18px;
        color: {p['text_muted']};
    }}

    QLabel#estimateLabel, QLabel#historyRow {{
        font-size: 13px;
        color: {p['text_muted']};
    }}

    QLabel#sectionLabel {{
        font-size: 18px;
        font-weight: 700;
    }}

    QLabel#lockedLabel {{
        font-size: 12px;
        color: {p['danger']};
    }}

    /* ── status bar ──────────────────────────────── */
    QStatusBar {{
        background-color: {p['bg']};
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
