"""
CodeLock: forced rest breaks for long coding sessions.
Entry point for the application.
"""

import faulthandler
import logging
import sys
from pathlib import Path

faulthandler.enable()

# Ensure codelock is importable
sys.path.insert(0, str(Path(__file__).resolve().parent))

from PySide6.QtWidgets import QApplication

from codelock.ui.main_window import MainWindow


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("codelock.log", encoding="utf-8"),
        ],
    )


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting CodeLock...")

    app = QApplication(sys.argv)
    app.setApplicationName("CodeLock")
    app.setOrganizationName("CodeLock")

    window = MainWindow()
    window.show()

    logger.info("Application started.")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The entry point. Sets up logging, creates the Qt application and opens
#   MainWindow, which builds the store, the database and the tick driver.
#
# Key points:
#   - sys.path manipulation: imports work whether you run from the repo
#     root or another directory.
#   - app.exec(): starts the Qt event loop, which also drives the 1 Hz
#     tick timer.
#
# Interviewer-friendly talking points:
#   1. Logging to both console and file: the file log is the only record
#      of a persistence failure, since the app deliberately hides those.
#   2. faulthandler: prints a traceback if Qt crashes at the C level.
