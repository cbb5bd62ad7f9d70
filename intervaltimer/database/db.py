"""Engine, session scope and queries for the workout log.

The SQLite file lives next to the settings file.  The engine is created
on first use; ``configure_engine`` swaps it out (tests use an in-memory
database).
"""

from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base, Workout

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "IntervalTimer"
DB_PATH = APP_SUPPORT_DIR / "intervaltimer.db"

_engine: Engine | None = None
_SessionFactory: sessionmaker | None = None


def _make_engine(url: str) -> Engine:
    return create_engine(url, connect_args={"check_same_thread": False})


def _get_engine() -> Engine:
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = _make_engine(f"sqlite:///{DB_PATH}")
    return _engine


def configure_engine(url: str) -> None:
    """Use *url* instead of the on-disk database from now on."""
    global _engine, _SessionFactory
    _engine = _make_engine(url)
    _SessionFactory = None


def init_db() -> None:
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Session scope: commit on success, rollback and re-raise on error."""
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    session: OrmSession = _SessionFactory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def recent_workouts(limit: int = 5) -> list[Workout]:
    """Newest first; ties on start time fall back to insertion order."""
    query = (
        select(Workout)
        .order_by(Workout.start_time.desc(), Workout.id.desc())
        .limit(limit)
    )
    with get_session() as db:
        return list(db.scalars(query))
