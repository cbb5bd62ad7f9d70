"""Allow running IntervalTimer as a module: python -m intervaltimer."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import IntervalTimerApp


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("intervaltimer")


def main() -> None:
    logger = setup_logging()

    db_enabled = True
    try:
        init_db()
    except Exception:
        logger.warning("Workout log unavailable; continuing without it", exc_info=True)
        db_enabled = False

    app = QApplication(sys.argv)
    app.setApplicationName("IntervalTimer")
    app.setOrganizationName("IntervalTimer")

    window = IntervalTimerApp(db_enabled=db_enabled)
    window.show()
    logger.info("IntervalTimer ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
