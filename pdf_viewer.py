"""
pdf_viewer.py — Page canvas with a transparent, clickable text overlay

PyMuPDF pixmap → QPixmap for the page bitmap. Every text run gets an
invisible QLabel over its glyphs; in edit mode a click swaps the label for
a QLineEdit in the same spot.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

import fitz  # PyMuPDF
from PyQt6.QtCore import QRect, Qt, pyqtSignal
from PyQt6.QtGui import QFont, QImage, QMouseEvent, QPixmap
from PyQt6.QtWidgets import QLabel, QLineEdit, QScrollArea, QWidget

from overlay import TextRunProxy

logger = logging.getLogger(__name__)

EDITOR_MIN_WIDTH = 40


def fitz_pixmap_to_qimage(pix: fitz.Pixmap) -> QImage:
    """Convert fitz.Pixmap to QImage."""
    fmt = QImage.Format.Format_RGB888 if pix.n == 3 else QImage.Format.Format_RGBA8888
    img = QImage(pix.samples, pix.width, pix.height, pix.stride, fmt)
    return img.copy()  # copy to detach from fitz memory


def proxy_rect(proxy: TextRunProxy) -> QRect:
    x, y, w, h = proxy.screen_rect
    return QRect(int(round(x)), int(round(y)), max(1, math.ceil(w)), max(1, math.ceil(h)))


# ─────────────────────────────────────────────
# Overlay
# ─────────────────────────────────────────────

class _ProxyLabel(QLabel):
    clicked = pyqtSignal(int)

    def __init__(self, index: int, proxy: TextRunProxy, parent: QWidget):
        super().__init__(proxy.text, parent)
        self.index = index
        font = QFont(proxy.font_name)
        font.setPixelSize(max(1, round(proxy.derived_font_size)))
        self.setFont(font)
        self.setGeometry(proxy_rect(proxy))
        self.setStyleSheet("color: transparent; background: transparent;")
        self.setCursor(Qt.CursorShape.IBeamCursor)

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit(self.index)
            return
        super().mousePressEvent(event)


class TextOverlay(QWidget):
    """Holds one label per run. Rebuilt from scratch on every page render."""

    proxy_clicked = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self._labels: list[_ProxyLabel] = []
        self._proxies: list[TextRunProxy] = []   # label index → proxy
        self.generation = 0
        self.set_interactive(False)

    @property
    def count(self) -> int:
        return len(self._proxies)

    def proxy(self, index: int) -> TextRunProxy:
        return self._proxies[index]

    def label(self, index: int) -> QLabel:
        return self._labels[index]

    def set_interactive(self, interactive: bool):
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, not interactive)

    def set_proxies(self, proxies: Sequence[TextRunProxy]):
        for label in self._labels:
            label.hide()
            label.deleteLater()
        self._labels = []
        self._proxies = list(proxies)
        for index, proxy in enumerate(self._proxies):
            label = _ProxyLabel(index, proxy, self)
            label.clicked.connect(self.proxy_clicked)
            label.show()
            self._labels.append(label)
        self.generation += 1

    def clear(self):
        self.set_proxies([])


# ─────────────────────────────────────────────
# Page View
# ─────────────────────────────────────────────

class PageView(QWidget):
    """Bitmap of the current page with the overlay stacked on top."""

    edit_committed = pyqtSignal(int, str)   # (proxy index, value)
    edit_abandoned = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._canvas = QLabel(self)
        self._canvas.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self._overlay = TextOverlay(self)
        self._editor: Optional[QLineEdit] = None
        self._editor_index: int = -1
        self.setFixedSize(0, 0)

    @property
    def overlay(self) -> TextOverlay:
        return self._overlay

    @property
    def is_editing(self) -> bool:
        return self._editor is not None

    def show_page(self, pixmap: fitz.Pixmap, width: int, height: int):
        # Always resize: a previous page may have had other dimensions
        self.setFixedSize(width, height)
        self._canvas.setGeometry(0, 0, width, height)
        self._canvas.setPixmap(QPixmap.fromImage(fitz_pixmap_to_qimage(pixmap)))
        self._overlay.setGeometry(0, 0, width, height)
        self._overlay.raise_()

    def show_overlay(self, proxies: Sequence[TextRunProxy]):
        self._take_editor()
        self._overlay.set_proxies(proxies)

    def clear(self):
        self._take_editor()
        self._canvas.clear()
        self._overlay.clear()
        self.setFixedSize(0, 0)

    # ── Inline editing ────────────────────────

    def begin_inline_edit(self, index: int):
        label = self._overlay.label(index)
        editor = QLineEdit(self._overlay)
        editor.setText(label.text())
        editor.setFont(label.font())
        geometry = label.geometry()
        geometry.setWidth(max(geometry.width(), EDITOR_MIN_WIDTH))
        editor.setGeometry(geometry)
        editor.setStyleSheet(
            "QLineEdit { background: rgba(255,255,255,245); border: 1px solid #000; padding: 0px; }"
        )
        label.hide()
        editor.show()
        editor.setFocus()

        self._editor = editor
        self._editor_index = index
        logger.debug("Inline edit opened on run %d", index)

        # Enter commits
        editor.returnPressed.connect(self.commit_inline_edit)

        # Escape abandons
        original_key_press = editor.keyPressEvent

        def _on_key_press(event):
            if event.key() == Qt.Key.Key_Escape:
                self._abandon_inline_edit()
                return
            original_key_press(event)

        editor.keyPressEvent = _on_key_press

        # Focus-out commits
        _orig_focus_out = editor.focusOutEvent

        def _on_focus_out(event):
            _orig_focus_out(event)
            self.commit_inline_edit()

        editor.focusOutEvent = _on_focus_out

    def _take_editor(self) -> tuple[Optional[QLineEdit], int]:
        editor, index = self._editor, self._editor_index
        # Clear state first: hiding the editor fires focus-out
        self._editor = None
        self._editor_index = -1
        if editor is not None:
            editor.hide()
            editor.deleteLater()
        return editor, index

    def commit_inline_edit(self):
        if self._editor is None:
            return
        value = self._editor.text()
        _, index = self._take_editor()
        self.edit_committed.emit(index, value)

    def _abandon_inline_edit(self):
        editor, index = self._take_editor()
        if editor is None:
            return
        self.restore_proxy(index, None, self._overlay.generation)
        self.edit_abandoned.emit(index)

    def restore_proxy(self, index: int, text: Optional[str], generation: int):
        """Show a proxy label again, unless the overlay was rebuilt meanwhile."""
        if generation != self._overlay.generation or not 0 <= index < self._overlay.count:
            return
        label = self._overlay.label(index)
        if text is not None:
            label.setText(text)
        label.show()


class PDFScrollView(QScrollArea):
    """Scroll area around the page view."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("pdfScrollArea")
        self._page_view = PageView()
        self.setWidget(self._page_view)
        self.setWidgetResizable(False)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)

    @property
    def page_view(self) -> PageView:
        return self._page_view
