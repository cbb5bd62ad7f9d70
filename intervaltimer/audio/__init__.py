"""Audio package."""

from .sounds import CuePlayer, CUE_NAMES

__all__ = ["CuePlayer", "CUE_NAMES"]
