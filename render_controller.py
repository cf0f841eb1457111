"""
render_controller.py — Renders one page into a display surface

The surface is anything implementing RenderSurface; the main window is the
real one, tests pass a recorder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

import fitz  # PyMuPDF

from config import MAIN_ZOOM, THUMBNAIL_ZOOM
from errors import PageIndexError
from overlay import TextRunProxy, build_proxies
from rendering import RasterView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageActions:
    """Which page buttons are shown."""
    delete: bool
    move_up: bool
    move_down: bool

    @classmethod
    def for_page(cls, page_number: int, total_pages: int) -> "PageActions":
        has_pages = total_pages > 0
        return cls(
            delete=has_pages,
            move_up=has_pages and page_number > 1,
            move_down=has_pages and page_number < total_pages,
        )


class RenderSurface(Protocol):
    def show_page(self, pixmap: fitz.Pixmap, width: int, height: int) -> None: ...
    def show_overlay(self, proxies: Sequence[TextRunProxy]) -> None: ...
    def show_thumbnails(self, pixmaps: Sequence[fitz.Pixmap]) -> None: ...
    def select_thumbnail(self, page_number: int) -> None: ...
    def set_page_actions(self, actions: PageActions) -> None: ...
    def clear(self) -> None: ...


class PageRenderController:

    def __init__(self, surface: RenderSurface, zoom: float = MAIN_ZOOM,
                 thumbnail_zoom: float = THUMBNAIL_ZOOM):
        self._surface = surface
        self.zoom = zoom
        self.thumbnail_zoom = thumbnail_zoom

    def render_page(self, page_number: int, raster_view: RasterView,
                    thumbnails: Optional[Sequence[fitz.Pixmap]] = None) -> list[TextRunProxy]:
        """Rasterize a page and rebuild its overlay. Caller clamps page_number.

        thumbnails, when given, replace the strip in the same surface update
        as the page.
        """
        total = raster_view.page_count
        if not 1 <= page_number <= total:
            raise PageIndexError(page_number, total)

        page = raster_view.page(page_number)
        viewport = page.viewport(self.zoom)
        # Everything that can fail happens before the surface is touched
        pixmap = page.rasterize(viewport)
        proxies = build_proxies(viewport.transform, page.text_runs())

        if thumbnails is not None:
            self._surface.show_thumbnails(thumbnails)
        self._surface.show_page(pixmap, viewport.width, viewport.height)
        self._surface.show_overlay(proxies)
        self._surface.select_thumbnail(page_number)
        self._surface.set_page_actions(PageActions.for_page(page_number, total))
        logger.debug("Rendered page %d/%d (%dx%d, %d runs)",
                     page_number, total, viewport.width, viewport.height, len(proxies))
        return proxies

    def thumbnail_pixmaps(self, raster_view: RasterView) -> list[fitz.Pixmap]:
        pixmaps = []
        for number in range(1, raster_view.page_count + 1):
            page = raster_view.page(number)
            pixmaps.append(page.rasterize(page.viewport(self.thumbnail_zoom)))
        return pixmaps

    def clear(self):
        self._surface.clear()
        self._surface.set_page_actions(PageActions.for_page(1, 0))
