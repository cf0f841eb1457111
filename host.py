"""
host.py — Native file dialogs and file I/O for the editor window
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import QFileDialog, QWidget

from config import PDF_FILE_FILTER, SAVE_DEFAULT_NAME
from errors import HostIOError

logger = logging.getLogger(__name__)


class HostShell:
    """Open / read / save. A cancelled dialog returns None, never raises."""

    def __init__(self, parent: Optional[QWidget] = None):
        self._parent = parent

    def open_file_dialog(self) -> Optional[str]:
        path, _ = QFileDialog.getOpenFileName(self._parent, "Open PDF", "", PDF_FILE_FILTER)
        return path or None

    def save_file_dialog(self) -> Optional[str]:
        path, _ = QFileDialog.getSaveFileName(
            self._parent, "Save PDF", SAVE_DEFAULT_NAME, PDF_FILE_FILTER
        )
        if not path:
            return None
        if not path.lower().endswith(".pdf"):
            path += ".pdf"
        return path

    @staticmethod
    def read_file(path: str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise HostIOError(f"cannot read {path}: {e}") from e

    @staticmethod
    def write_file(path: str, data: bytes):
        try:
            Path(path).write_bytes(data)
        except OSError as e:
            raise HostIOError(f"cannot write {path}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(data), path)

    def save(self, data: bytes) -> Optional[str]:
        path = self.save_file_dialog()
        if path is None:
            logger.debug("Save cancelled")
            return None
        self.write_file(path, data)
        return path
