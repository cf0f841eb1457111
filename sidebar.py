"""
sidebar.py — Page thumbnail strip
"""

from __future__ import annotations

from typing import Sequence

import fitz  # PyMuPDF
from PyQt6.QtCore import QSize, Qt, pyqtSignal
from PyQt6.QtGui import QIcon, QPixmap
from PyQt6.QtWidgets import (
    QAbstractItemView, QLabel, QListWidget, QListWidgetItem, QVBoxLayout, QWidget,
)

from pdf_viewer import fitz_pixmap_to_qimage

THUMB_W = 140
THUMB_H = 190


class ThumbnailPanel(QWidget):
    """One item per page, labelled "Page N". Emits 1-based page numbers."""

    page_selected = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        header = QLabel("Pages")
        header.setStyleSheet("font-weight: bold; padding: 6px 8px; color: #555;")
        layout.addWidget(header)

        self._list = QListWidget()
        self._list.setViewMode(QListWidget.ViewMode.IconMode)
        self._list.setIconSize(QSize(THUMB_W, THUMB_H))
        self._list.setResizeMode(QListWidget.ResizeMode.Adjust)
        self._list.setMovement(QListWidget.Movement.Static)
        self._list.setFlow(QListWidget.Flow.TopToBottom)
        self._list.setWrapping(False)
        self._list.setSpacing(10)
        self._list.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self._list.setMinimumWidth(THUMB_W + 40)
        self._list.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self._list.itemClicked.connect(self._on_item_clicked)
        self._list.setStyleSheet(
            "QListWidget { background: #fafafa; border: none; padding: 5px; }"
            "QListWidget::item { border-radius: 6px; }"
            "QListWidget::item:selected { background: rgba(41, 121, 255, 0.12); }"
        )
        layout.addWidget(self._list)

    def show_thumbnails(self, pixmaps: Sequence[fitz.Pixmap]):
        self._list.clear()
        for number, pix in enumerate(pixmaps, start=1):
            thumb = QPixmap.fromImage(fitz_pixmap_to_qimage(pix)).scaled(
                THUMB_W, THUMB_H,
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
            item = QListWidgetItem(QIcon(thumb), f"Page {number}")
            item.setSizeHint(QSize(THUMB_W + 10, THUMB_H + 24))
            item.setTextAlignment(Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignBottom)
            item.setData(Qt.ItemDataRole.UserRole, number)
            self._list.addItem(item)

    def select(self, page_number: int):
        row = page_number - 1
        if not 0 <= row < self._list.count():
            return
        self._list.blockSignals(True)
        self._list.setCurrentRow(row)
        self._list.scrollToItem(self._list.item(row))
        self._list.blockSignals(False)

    def clear(self):
        self._list.clear()

    def _on_item_clicked(self, item: QListWidgetItem):
        self.page_selected.emit(int(item.data(Qt.ItemDataRole.UserRole)))
