"""
document.py — Mutable document model over PyMuPDF

Drawing calls take PDF user-space coordinates (origin bottom-left, y up),
the same convention the edit layer computes in. Conversion to PyMuPDF's
top-left page space happens here and nowhere else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import fitz  # PyMuPDF

from config import DEFAULT_PAGE_SIZE
from errors import PageIndexError, ParseError, SerializationError

logger = logging.getLogger(__name__)

Color = tuple[float, float, float]
WHITE: Color = (1.0, 1.0, 1.0)
BLACK: Color = (0.0, 0.0, 0.0)

# Base-14 fonts by PostScript name → PyMuPDF short code
STANDARD_FONTS = {
    "Helvetica": "helv",
    "Helvetica-Bold": "hebo",
    "Helvetica-Oblique": "heit",
    "Times-Roman": "tiro",
    "Times-Bold": "tibo",
    "Courier": "cour",
    "Courier-Bold": "cobo",
    "Symbol": "symb",
    "ZapfDingbats": "zadb",
}


@dataclass(frozen=True)
class StandardFont:
    name: str
    code: str


class DocumentPage:
    """One page. Sizes are of the unrotated page, like text run coordinates."""

    def __init__(self, page: fitz.Page):
        self._page = page

    @property
    def width(self) -> float:
        return self._page.mediabox.width

    @property
    def height(self) -> float:
        return self._page.mediabox.height

    def _to_page_rect(self, x: float, y: float, width: float, height: float) -> fitz.Rect:
        top = self.height - (y + height)
        return fitz.Rect(x, top, x + width, top + height)

    def draw_rectangle(self, x: float, y: float, width: float, height: float,
                       color: Color = WHITE):
        """Opaque filled rectangle, no border, painted over existing content."""
        self._page.draw_rect(
            self._to_page_rect(x, y, width, height),
            color=None, fill=color, overlay=True,
        )

    def draw_text(self, text: str, x: float, y: float, font: StandardFont,
                  size: float, color: Color = BLACK):
        """Single line of text with its baseline starting at (x, y)."""
        self._page.insert_text(
            fitz.Point(x, self.height - y),
            text,
            fontname=font.code,
            fontsize=size,
            color=color,
            render_mode=0,
        )


class DocumentView:
    """Mutable view; add/remove/reorder/draw, then serialize back to bytes."""

    def __init__(self, doc: fitz.Document):
        self._doc = doc

    @classmethod
    def create(cls) -> "DocumentView":
        return cls(fitz.open())

    @classmethod
    def parse(cls, data: bytes) -> "DocumentView":
        if not data:
            raise ParseError("empty byte buffer")
        try:
            doc = fitz.open(stream=bytes(data), filetype="pdf")
        except Exception as e:
            raise ParseError(f"cannot parse PDF: {e}") from e
        return cls(doc)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    @property
    def pages(self) -> list[DocumentPage]:
        return [DocumentPage(p) for p in self._doc]

    def page(self, index: int) -> DocumentPage:
        """0-based access."""
        self._check_index(index)
        return DocumentPage(self._doc[index])

    def add_page(self, width: float = DEFAULT_PAGE_SIZE[0],
                 height: float = DEFAULT_PAGE_SIZE[1]) -> DocumentPage:
        return DocumentPage(self._doc.new_page(-1, width=width, height=height))

    def remove_page(self, index: int):
        self._check_index(index)
        self._doc.delete_page(index)

    def move_page(self, from_index: int, to_index: int):
        """Take the page at from_index out and reinsert it so it ends up at to_index."""
        self._check_index(from_index)
        self._check_index(to_index)
        if from_index == to_index:
            return
        # PyMuPDF inserts *before* its target; -1 appends
        if to_index == self.page_count - 1:
            self._doc.move_page(from_index, -1)
        elif to_index < from_index:
            self._doc.move_page(from_index, to_index)
        else:
            self._doc.move_page(from_index, to_index + 1)

    def embed_standard_font(self, name: str) -> StandardFont:
        try:
            code = STANDARD_FONTS[name]
        except KeyError:
            raise ValueError(f"{name!r} is not a standard PDF font") from None
        return StandardFont(name=name, code=code)

    def serialize(self) -> bytes:
        if self.page_count == 0:
            raise SerializationError("a document without pages cannot be saved")
        try:
            data = self._doc.tobytes(garbage=3, deflate=True)
        except Exception as e:
            raise SerializationError(f"cannot serialize document: {e}") from e
        logger.debug("Serialized %d pages (%d bytes)", self.page_count, len(data))
        return data

    def close(self):
        if self._doc is not None:
            self._doc.close()
            self._doc = None

    def _check_index(self, index: int):
        if not 0 <= index < self.page_count:
            raise PageIndexError(index + 1, self.page_count)
