"""
session.py — The single open document and every operation that changes it

The session owns two views parsed from the same bytes: a RasterView for
display and a DocumentView for mutation. Every mutation ends in
_commit(), which serializes the DocumentView and reloads both views from
the result, so the two never disagree once an operation returns.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from document import DocumentView
from errors import SessionBusyError
from overlay import TextRunProxy
from render_controller import PageRenderController
from rendering import RasterView

logger = logging.getLogger(__name__)


class SaveTarget(Protocol):
    def save(self, data: bytes) -> Optional[str]: ...


@dataclass(frozen=True)
class SessionState:
    current_page: int
    total_pages: int
    has_document: bool


class DocumentSession:

    def __init__(self, renderer: PageRenderController, host: SaveTarget):
        self._renderer = renderer
        self._host = host
        self.raster_view: Optional[RasterView] = None
        self.document_view: Optional[DocumentView] = None
        self.current_page: int = 1
        self.total_pages: int = 0
        self.original_bytes: Optional[bytes] = None
        self.proxies: list[TextRunProxy] = []   # overlay of the page on screen
        self._running: Optional[str] = None

    def state(self) -> SessionState:
        return SessionState(
            current_page=self.current_page,
            total_pages=self.total_pages,
            has_document=self.document_view is not None,
        )

    @property
    def busy(self) -> bool:
        return self._running is not None

    @contextmanager
    def _operation(self, name: str):
        if self._running is not None:
            logger.warning("Rejected %s while %s is running", name, self._running)
            raise SessionBusyError(name, self._running)
        self._running = name
        try:
            yield
        finally:
            self._running = None

    # ── Loading ───────────────────────────────

    def load(self, data: bytes):
        with self._operation("load"):
            self._load(data)

    def clear(self):
        with self._operation("clear"):
            self._clear()

    def _load(self, data: bytes):
        raster = RasterView.parse(data)
        document = DocumentView.parse(data)
        total = raster.page_count
        if total == 0:
            raster.close()
            document.close()
            self._clear()
            return

        page = min(max(self.current_page, 1), total)
        try:
            thumbnails = self._renderer.thumbnail_pixmaps(raster)
            proxies = self._renderer.render_page(page, raster, thumbnails)
        except Exception:
            raster.close()
            document.close()
            raise

        self._replace_views(raster, document)
        self.original_bytes = bytes(data)
        self.total_pages = total
        self.current_page = page
        self.proxies = proxies
        logger.info("Loaded document: %d pages, showing page %d", total, page)

    def _clear(self):
        self._replace_views(None, None)
        self.original_bytes = None
        self.total_pages = 0
        self.current_page = 1
        self.proxies = []
        self._renderer.clear()
        logger.info("Session cleared")

    def _replace_views(self, raster: Optional[RasterView], document: Optional[DocumentView]):
        if self.raster_view is not None and self.raster_view is not raster:
            self.raster_view.close()
        if self.document_view is not None and self.document_view is not document:
            self.document_view.close()
        self.raster_view = raster
        self.document_view = document

    # ── Mutation ──────────────────────────────

    def mutate(self, name: str, change: Callable[[DocumentView], Optional[int]],
               create: bool = False):
        """Apply change to the document view, then serialize and reload.

        change may return the page number to show after the reload. If
        anything fails the document view is re-parsed from the last loaded
        bytes and the page number is restored. With create=True an empty
        session starts from a new, page-less document.
        """
        with self._operation(name):
            if self.document_view is None:
                if not create:
                    raise RuntimeError(f"{name}: no document is loaded")
                self.document_view = DocumentView.create()
            previous_page = self.current_page
            try:
                page = change(self.document_view)
                if page is not None:
                    self.current_page = page
                self._commit()
            except Exception:
                self.current_page = previous_page
                self._restore_document()
                raise
            logger.info("%s done: page %d of %d", name, self.current_page, self.total_pages)

    def _commit(self):
        if self.document_view.page_count == 0:
            # PyMuPDF refuses to write a page-less PDF; there is nothing left to keep in sync
            self._clear()
            return
        self._load(self.document_view.serialize())

    def _restore_document(self):
        if self.document_view is not None:
            self.document_view.close()
        self.document_view = (
            DocumentView.parse(self.original_bytes) if self.original_bytes else None
        )

    def add_page(self):
        def change(doc: DocumentView) -> int:
            doc.add_page()
            return doc.page_count

        self.mutate("add page", change, create=True)

    def delete_page(self):
        if self.document_view is None or self.total_pages == 0:
            logger.debug("delete page: nothing to delete")
            return
        index = self.current_page - 1
        # current_page is left alone; _load clamps it when the last page goes
        self.mutate("delete page", lambda doc: doc.remove_page(index))

    def move_page_up(self):
        if self.document_view is None or self.current_page <= 1:
            logger.debug("move page up: already first page")
            return
        index = self.current_page - 1

        def change(doc: DocumentView) -> int:
            doc.move_page(index, index - 1)
            return index

        self.mutate("move page up", change)

    def move_page_down(self):
        if self.document_view is None or self.current_page >= self.total_pages:
            logger.debug("move page down: already last page")
            return
        index = self.current_page - 1

        def change(doc: DocumentView) -> int:
            doc.move_page(index, index + 1)
            return index + 2

        self.mutate("move page down", change)

    # ── Navigation & save ─────────────────────

    def navigate_to(self, page_number: int):
        """Show another page without touching the document view."""
        if self.original_bytes is None or page_number == self.current_page:
            return
        with self._operation("navigate"):
            raster = RasterView.parse(self.original_bytes)
            try:
                proxies = self._renderer.render_page(page_number, raster)
            except Exception:
                raster.close()
                raise
            if self.raster_view is not None:
                self.raster_view.close()
            self.raster_view = raster
            self.current_page = page_number
            self.proxies = proxies

    def save(self) -> Optional[str]:
        if self.document_view is None:
            return None
        with self._operation("save"):
            path = self._host.save(self.document_view.serialize())
        if path:
            logger.info("Saved document to %s", path)
        return path
