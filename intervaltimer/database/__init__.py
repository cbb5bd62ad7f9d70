"""Database package."""

from .db import get_session, init_db, recent_workouts
from .models import Workout

__all__ = ["get_session", "init_db", "recent_workouts", "Workout"]
