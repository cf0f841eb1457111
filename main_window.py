"""
main_window.py — Main application window

Wires the toolbar, thumbnail strip and page view to the document session.
The window is also the render surface the page controller draws into.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

import fitz  # PyMuPDF
from PyQt6.QtGui import QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QMainWindow, QMessageBox, QSplitter,
    QStatusBar, QToolButton, QVBoxLayout, QWidget,
)

from config import APP_NAME, WINDOW_SIZE
from editing import EditApplier
from errors import EditorError
from host import HostShell
from interaction import InlineEditController
from overlay import TextRunProxy
from pdf_viewer import PDFScrollView
from render_controller import PageActions, PageRenderController
from session import DocumentSession
from sidebar import ThumbnailPanel

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
# Tool button helper
# ─────────────────────────────────────────────

def make_tool_button(text: str, tooltip: str) -> QToolButton:
    btn = QToolButton()
    btn.setText(text)
    btn.setToolTip(tooltip)
    btn.setMinimumHeight(30)
    btn.setStyleSheet(
        "QToolButton { border: none; border-radius: 4px; padding: 4px 10px; font-size: 12px; }"
        "QToolButton:hover { background: rgba(0,0,0,0.08); }"
        "QToolButton:pressed { background: rgba(0,0,0,0.15); }"
    )
    return btn


DIVIDER_STYLE = "background: #d0d0d0; min-width: 1px; max-width: 1px; margin: 3px 4px;"


def make_divider() -> QFrame:
    d = QFrame()
    d.setFrameShape(QFrame.Shape.VLine)
    d.setStyleSheet(DIVIDER_STYLE)
    return d


# ─────────────────────────────────────────────
# Main Window
# ─────────────────────────────────────────────

class MainWindow(QMainWindow):

    def __init__(self):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.resize(*WINDOW_SIZE)

        self._host = HostShell(self)
        self._renderer = PageRenderController(self)
        self._session = DocumentSession(self._renderer, self._host)
        self._applier = EditApplier(self._session)
        self._edit_ctl = InlineEditController(self._applier.apply_edit)

        self._build_ui()
        self._connect_signals()
        self.set_page_actions(PageActions.for_page(1, 0))

    # ── UI Build ──────────────────────────────

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_vl = QVBoxLayout(central)
        main_vl.setContentsMargins(0, 0, 0, 0)
        main_vl.setSpacing(0)

        toolbar = QWidget()
        toolbar.setFixedHeight(40)
        toolbar.setStyleSheet("background: #efefef;")
        tbl = QHBoxLayout(toolbar)
        tbl.setContentsMargins(6, 4, 6, 4)
        tbl.setSpacing(2)

        self._open_btn = make_tool_button("Open PDF", "Open a PDF file (Ctrl+O)")
        self._edit_btn = make_tool_button("Edit Mode", "Click text on the page to edit it")
        self._edit_btn.setCheckable(True)
        self._save_btn = make_tool_button("Save PDF", "Save the edited PDF (Ctrl+S)")
        self._add_btn = make_tool_button("Add Page", "Append a blank page")
        self._delete_btn = make_tool_button("Delete Page", "Delete the current page")
        self._up_btn = make_tool_button("Move Up", "Move the current page up")
        self._down_btn = make_tool_button("Move Down", "Move the current page down")

        for w in (self._open_btn, self._edit_btn, self._save_btn, make_divider(),
                  self._add_btn, self._delete_btn, self._up_btn, self._down_btn):
            tbl.addWidget(w)
        tbl.addStretch()
        self._page_label = QLabel("")
        self._page_label.setStyleSheet("color: #555; padding: 0 6px;")
        tbl.addWidget(self._page_label)
        main_vl.addWidget(toolbar)

        self._save_btn.setVisible(False)

        splitter = QSplitter()
        self._thumbnails = ThumbnailPanel()
        self._pdf_scroll = PDFScrollView()
        splitter.addWidget(self._thumbnails)
        splitter.addWidget(self._pdf_scroll)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        main_vl.addWidget(splitter, 1)

        self.setStatusBar(QStatusBar())

    def _connect_signals(self):
        self._open_btn.clicked.connect(self._open_file)
        self._edit_btn.toggled.connect(self._toggle_edit_mode)
        self._save_btn.clicked.connect(self._save_file)
        self._add_btn.clicked.connect(lambda: self._run("Add page", self._session.add_page))
        self._delete_btn.clicked.connect(
            lambda: self._run("Delete page", self._session.delete_page))
        self._up_btn.clicked.connect(lambda: self._run("Move page", self._session.move_page_up))
        self._down_btn.clicked.connect(
            lambda: self._run("Move page", self._session.move_page_down))
        self._thumbnails.page_selected.connect(self._on_thumbnail_selected)

        page_view = self._pdf_scroll.page_view
        page_view.overlay.proxy_clicked.connect(self._on_proxy_clicked)
        page_view.edit_committed.connect(self._on_edit_committed)
        page_view.edit_abandoned.connect(lambda _index: self._edit_ctl.abandon())

        QShortcut(QKeySequence("Ctrl+O"), self, activated=self._open_file)
        QShortcut(QKeySequence("Ctrl+S"), self, activated=self._save_file)

    # ── Render surface ────────────────────────

    def show_page(self, pixmap: fitz.Pixmap, width: int, height: int):
        self._pdf_scroll.page_view.show_page(pixmap, width, height)

    def show_overlay(self, proxies: Sequence[TextRunProxy]):
        # A rebuilt overlay drops any open editor with it
        self._edit_ctl.abandon()
        self._pdf_scroll.page_view.show_overlay(proxies)

    def show_thumbnails(self, pixmaps: Sequence[fitz.Pixmap]):
        self._thumbnails.show_thumbnails(pixmaps)

    def select_thumbnail(self, page_number: int):
        self._thumbnails.select(page_number)

    def set_page_actions(self, actions: PageActions):
        self._delete_btn.setVisible(actions.delete)
        self._up_btn.setVisible(actions.move_up)
        self._down_btn.setVisible(actions.move_down)
        self._update_page_label()

    def clear(self):
        self._edit_ctl.abandon()
        self._pdf_scroll.page_view.clear()
        self._thumbnails.clear()

    # ── Operations ────────────────────────────

    def _run(self, title: str, action: Callable[[], object]) -> bool:
        """Run a session operation; report failures without touching session state."""
        # An open inline editor is committed before anything else reloads the page
        self._pdf_scroll.page_view.commit_inline_edit()
        try:
            action()
        except EditorError as e:
            logger.error("%s failed: %s", title, e)
            QMessageBox.critical(self, title, str(e))
            return False
        finally:
            self._update_page_label()
        return True

    def load_startup_document(self, path: Path):
        try:
            self._session.load(HostShell.read_file(str(path)))
        except EditorError as e:
            logger.warning("Failed to load initial PDF %s: %s", path, e)
            self._session.clear()
            return
        self._set_status(f"{path.name} — {self._session.total_pages}p")

    def _open_file(self):
        path = self._host.open_file_dialog()
        if not path:
            return

        def _load():
            self._session.load(self._host.read_file(path))

        if self._run("Open PDF", _load):
            self._set_status(f"{Path(path).name} — {self._session.total_pages}p")

    def _save_file(self):
        saved: list[Optional[str]] = []
        if self._run("Save PDF", lambda: saved.append(self._session.save())) and saved[0]:
            self._set_status(f"Saved {Path(saved[0]).name}")

    def _toggle_edit_mode(self, enabled: bool):
        self._pdf_scroll.page_view.commit_inline_edit()
        self._edit_ctl.set_enabled(enabled)
        self._edit_btn.setText("Exit Edit Mode" if enabled else "Edit Mode")
        self._save_btn.setVisible(enabled)
        self._pdf_scroll.page_view.overlay.set_interactive(enabled)

    def _on_thumbnail_selected(self, page_number: int):
        self._run("Go to page", lambda: self._session.navigate_to(page_number))

    # ── Inline text editing ───────────────────

    def _on_proxy_clicked(self, index: int):
        page_view = self._pdf_scroll.page_view
        if self._session.busy or page_view.is_editing:
            return
        if self._edit_ctl.begin(index, page_view.overlay.proxy(index)) is None:
            return
        page_view.begin_inline_edit(index)

    def _on_edit_committed(self, index: int, value: str):
        page_view = self._pdf_scroll.page_view
        generation = page_view.overlay.generation
        pending = self._edit_ctl.pending
        if pending is None:
            return
        text = pending.proxy.text
        if self._run("Edit text", lambda: self._edit_ctl.commit(value)):
            text = value
        page_view.restore_proxy(index, text, generation)

    # ── Status ────────────────────────────────

    def _update_page_label(self):
        state = self._session.state()
        if state.total_pages:
            self._page_label.setText(f"{state.current_page} / {state.total_pages}")
        else:
            self._page_label.setText("")

    def _set_status(self, msg: str):
        self.statusBar().showMessage(msg, 4000)
