"""
rendering.py — Read-only rasterizing view over a PDF byte buffer

Wraps a PyMuPDF document opened from memory. Page numbers are 1-based.
All coordinates are PyMuPDF page space: origin top-left, y grows downward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import fitz  # PyMuPDF

from errors import PageIndexError, ParseError, RenderError
from geometry import Transform, as_transform, compose, scale_transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextRun:
    """One span of text as the engine reports it."""
    transform: Transform   # glyph-space → page-space, baseline origin in (e, f)
    width: float
    height: float
    font_name: str
    text: str


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int
    scale: float
    transform: Transform   # page-space → pixel-space


class RasterPage:
    def __init__(self, page: fitz.Page, number: int):
        self._page = page  # keep the page alive while we hold its data
        self.number = number

    @property
    def width(self) -> float:
        return self._page.rect.width

    @property
    def height(self) -> float:
        return self._page.rect.height

    def viewport(self, scale: float) -> Viewport:
        """Pixel size and page-space → pixel transform of the rasterized page.

        Text runs are reported on the unrotated page while the pixmap shows
        it with /Rotate applied, so the transform carries the page rotation.
        """
        # Same rounding PyMuPDF applies when sizing the pixmap
        irect = (self._page.rect * fitz.Matrix(scale, scale)).irect
        rotation = as_transform(self._page.rotation_matrix)
        return Viewport(
            width=irect.width,
            height=irect.height,
            scale=scale,
            transform=compose(scale_transform(scale), rotation),
        )

    def rasterize(self, viewport: Viewport) -> fitz.Pixmap:
        try:
            return self._page.get_pixmap(
                matrix=fitz.Matrix(viewport.scale, viewport.scale), alpha=False
            )
        except Exception as e:
            raise RenderError(f"cannot rasterize page {self.number}: {e}") from e

    def text_runs(self) -> list[TextRun]:
        """Every non-empty span on the page, in content order."""
        try:
            text_dict = self._page.get_text("dict")
        except Exception as e:
            raise RenderError(f"cannot extract text from page {self.number}: {e}") from e

        runs: list[TextRun] = []
        for block in text_dict.get("blocks", []):
            if block.get("type") != 0:
                continue
            for line in block.get("lines", []):
                cos, sin = line.get("dir", (1.0, 0.0))
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if not text:
                        continue
                    size = float(span.get("size", 0.0))
                    x0, y0, x1, y1 = span["bbox"]
                    ox, oy = span.get("origin", (x0, y1))
                    runs.append(TextRun(
                        transform=(size * cos, size * sin, -size * sin, size * cos,
                                   float(ox), float(oy)),
                        width=float(x1 - x0),
                        height=float(y1 - y0),
                        font_name=span.get("font", ""),
                        text=text,
                    ))
        return runs


class RasterView:
    """Read-only view; rebuilt from bytes on every session load."""

    def __init__(self, doc: fitz.Document):
        self._doc = doc

    @classmethod
    def parse(cls, data: bytes) -> "RasterView":
        if not data:
            raise ParseError("empty byte buffer")
        try:
            doc = fitz.open(stream=bytes(data), filetype="pdf")
        except Exception as e:
            raise ParseError(f"cannot parse PDF: {e}") from e
        logger.debug("Raster view parsed: %d pages", doc.page_count)
        return cls(doc)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def page(self, number: int) -> RasterPage:
        if not 1 <= number <= self.page_count:
            raise PageIndexError(number, self.page_count)
        return RasterPage(self._doc[number - 1], number)

    def close(self):
        if self._doc is not None:
            self._doc.close()
            self._doc = None

