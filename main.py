"""
main.py — Entry point for PDF Overlay Editor
"""

import logging
import os
import sys

# High-DPI support
os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QApplication

from config import APP_NAME, ORG_NAME, AppConfig
from main_window import MainWindow


def main():
    config = AppConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(ORG_NAME)
    app.setStyle("Fusion")
    app.setFont(QFont("Segoe UI", 10))

    app.setStyleSheet("""
        QMainWindow { background: #f0f0f0; }
        QScrollArea#pdfScrollArea { border: none; background: #444; }
        QSplitter::handle { background: #d0d0d0; }
        QListWidget { border: none; }
        QStatusBar { background: #fafafa; border-top: 1px solid #e0e0e0; }
    """)

    window = MainWindow()
    window.load_startup_document(config.sample_pdf)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
