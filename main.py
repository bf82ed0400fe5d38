"""
MPR Viewer

Main entry point for the application.
"""

import argparse
import sys
from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

from config import DEFAULT_GUI
from gui.main_window import MainWindow
from gui.style import ViewerStyle
import logging


def setup_logging(level: int = logging.INFO):
    """Configure logging to stdout."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=DEFAULT_GUI.window_title)
    parser.add_argument("series", nargs="?", help="DICOM series folder to open on start")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main():
    """Application entry point."""
    args = parse_args()
    setup_logging(logging.DEBUG if args.debug else logging.INFO)
    
    # Enable High DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )
    
    app = QApplication(sys.argv[:1])
    app.setApplicationName(DEFAULT_GUI.window_title)
    app.setApplicationVersion("1.0")
    app.setOrganizationName("Research")
    app.setFont(QFont("Segoe UI", 10))
    ViewerStyle.apply(app)
    
    window = MainWindow()
    window.show()
    if args.series:
        window.load_series(args.series)
    
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
