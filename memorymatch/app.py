"""Application entry point and setup for the Memory Match game."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from memorymatch.core.collaborators import LoggingFeedbackSink
from memorymatch.core.progress import ProgressStore
from memorymatch.core.rules import load_rules
from memorymatch.core.scoring import AchievementCatalog
from memorymatch.core.session import GameSession
from memorymatch.ui.colors import CARD_PALETTE
from memorymatch.ui.main_window import MainWindow
from memorymatch.ui.qt_scheduler import QtScheduler


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Initialize the application, load the rules, and start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Memory Match")
    app.setApplicationDisplayName("Memory Match")

    rules = load_rules()
    catalog = AchievementCatalog()
    progress_store = ProgressStore()
    session = GameSession(
        scheduler=QtScheduler(app),
        palette=CARD_PALETTE,
        rules=rules,
        profile=progress_store,
        high_scores=progress_store,
        feedback=LoggingFeedbackSink(),
    )
    logging.info(f"Loaded rules: {rules.time_limit}s time mode, {rules.difficult_time_limit}s difficult mode")

    window = MainWindow(session=session, progress_store=progress_store, catalog=catalog)
    window.show()

    sys.exit(app.exec())
