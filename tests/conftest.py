"""Shared pytest fixtures for IntervalTimer tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from intervaltimer.database.db import configure_engine, init_db
from intervaltimer.timer.engine import WorkoutSession
from intervaltimer.timer.phases import WorkoutConfig


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture(autouse=True)
def app_dirs(tmp_path, monkeypatch):
    """Keep the settings file out of the real home directory."""
    support = tmp_path / "support"
    monkeypatch.setattr("intervaltimer.settings.APP_SUPPORT_DIR", support)
    monkeypatch.setattr("intervaltimer.settings.SETTINGS_PATH", support / "settings.json")
    return support


@pytest.fixture
def session(qapp):
    """Fresh WorkoutSession with default config and the workout log enabled."""
    return WorkoutSession(WorkoutConfig(), db_enabled=True)


@pytest.fixture
def session_no_db(qapp):
    """Fresh WorkoutSession with the workout log disabled."""
    return WorkoutSession(WorkoutConfig(), db_enabled=False)


@pytest.fixture
def short_session(qapp):
    """2 sets of 30/30 with prep, no database."""
    return WorkoutSession(
        WorkoutConfig(work_seconds=30, rest_seconds=30, total_sets=2, prep_enabled=True),
        db_enabled=False,
    )
