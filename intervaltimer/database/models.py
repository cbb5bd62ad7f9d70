"""SQLAlchemy ORM models for IntervalTimer."""

from datetime import datetime
from sqlalchemy import Column, Integer, Boolean, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class Workout(Base):
    """One workout run, from start until DONE or reset."""

    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    start_time = Column(DateTime, nullable=False, default=datetime.now)
    end_time = Column(DateTime, nullable=True)
    work_seconds = Column(Integer, nullable=False)
    rest_seconds = Column(Integer, nullable=False)
    total_sets = Column(Integer, nullable=False)
    prep_enabled = Column(Boolean, nullable=False, default=True)
    sets_completed = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)

    @property
    def active_seconds(self) -> int:
        """WORK + REST time covered by the finished sets."""
        return self.sets_completed * (self.work_seconds + self.rest_seconds)

    def __repr__(self) -> str:
        return (
            f"<Workout id={self.id} sets={self.sets_completed}/{self.total_sets} "
            f"completed={self.completed}>"
        )
