"""
editing.py — Writes an in-place text edit back into the document

An edit never removes the old glyphs from the content stream. It paints an
opaque white box over them and draws the new string on top, at the run's
original baseline and size, then hands off to the session to serialize and
reload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from config import COVER_PAD_ABOVE, COVER_PAD_BELOW, COVER_PAD_X, EDIT_FONT
from document import BLACK, WHITE, DocumentView
from overlay import TextRunProxy
from session import DocumentSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditPlan:
    """Everything an edit draws, in PDF user space (origin bottom-left)."""
    cover: tuple[float, float, float, float]   # x, y, width, height
    anchor: tuple[float, float]                 # baseline start of the new text
    font_size: float
    text: str


def plan_edit(proxy: TextRunProxy, new_text: str, page_height: float) -> EditPlan:
    x, y = proxy.anchor
    font_size = proxy.source_font_size
    # Run transforms are top-down, the document model draws bottom-up
    y_doc = page_height - y
    return EditPlan(
        cover=(
            x - COVER_PAD_X,
            y_doc - font_size * COVER_PAD_BELOW,
            proxy.width + 2 * COVER_PAD_X,
            proxy.height + font_size * COVER_PAD_ABOVE,
        ),
        anchor=(x, y_doc),
        font_size=font_size,
        text=new_text,
    )


class EditApplier:

    def __init__(self, session: DocumentSession, font_name: str = EDIT_FONT):
        self._session = session
        self._font_name = font_name

    def apply_edit(self, proxy: TextRunProxy, new_text: str) -> bool:
        """Draw new_text over the run on the current page and reload.

        Returns False when there is no document to edit. Any overlay or
        proxy the caller holds is stale once this returns True.
        """
        if self._session.document_view is None:
            logger.debug("Edit ignored: no document loaded")
            return False

        page_index = self._session.current_page - 1

        def change(doc: DocumentView):
            page = doc.page(page_index)
            plan = plan_edit(proxy, new_text, page.height)
            page.draw_rectangle(*plan.cover, color=WHITE)
            font = doc.embed_standard_font(self._font_name)
            page.draw_text(plan.text, *plan.anchor, font=font,
                           size=plan.font_size, color=BLACK)

        logger.info("Editing run %r → %r on page %d", proxy.text, new_text, page_index + 1)
        self._session.mutate("edit text", change)
        return True
