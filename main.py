"""
Main entry point for the Fahrplan application.

This module sets up logging, loads the configuration, and starts the
main window.
"""

import logging
import os
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication, QMessageBox

from fahrplan.managers.config_manager import ConfigManager, ConfigurationError
from fahrplan.managers.fahrplan_manager import FahrplanManager
from fahrplan.ui.main_window import MainWindow
from version import __app_display_name__, __app_name__, __company__, __version__, get_version_string


def get_log_dir() -> Path:
    """Per-platform directory for the log file."""
    if sys.platform == "darwin":  # macOS
        return Path.home() / "Library" / "Logs" / "Fahrplan"
    elif sys.platform == "win32":  # Windows
        return Path(os.environ.get("APPDATA", Path.home())) / "Fahrplan" / "logs"
    else:  # Linux and others
        return Path.home() / ".local" / "share" / "fahrplan" / "logs"


def setup_logging(level: int = logging.INFO) -> None:
    """Setup application logging with file and console output."""
    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "fahrplan.log"

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(str(log_file)), logging.StreamHandler()],
    )

    # Request logging comes from the trace hooks in fahrplan.api
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def main():
    """Main application entry point."""
    setup_logging()
    logger = logging.getLogger(__name__)

    logger.info(f"Starting {get_version_string()}")

    app = QApplication(sys.argv)
    app.setApplicationName(__app_name__)
    app.setApplicationDisplayName(__app_display_name__)
    app.setApplicationVersion(__version__)
    app.setOrganizationName(__company__)

    try:
        config = ConfigManager().load_config()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        msg_box = QMessageBox()
        msg_box.setIcon(QMessageBox.Icon.Critical)
        msg_box.setWindowTitle("Configuration Error")
        msg_box.setText(str(e))
        msg_box.exec()
        sys.exit(1)

    manager = FahrplanManager(config)
    window = MainWindow(config, manager)
    window.show()

    exit_code = app.exec()
    logger.info(f"Application exiting with code {exit_code}")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
