"""
interaction.py — Click-to-edit state machine for overlay proxies

Display → Editing on click (edit mode on, nothing else open).
Editing → Display on commit or abandon. The edit is only written back when
the committed text differs from the run's original text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from overlay import TextRunProxy

logger = logging.getLogger(__name__)


class EditState(Enum):
    DISPLAY = "display"
    EDITING = "editing"


@dataclass(frozen=True)
class PendingEdit:
    index: int            # position of the proxy in the overlay
    proxy: TextRunProxy   # snapshot taken when editing began


class InlineEditController:

    def __init__(self, apply_edit: Callable[[TextRunProxy, str], object]):
        self._apply_edit = apply_edit
        self._enabled = False
        self._pending: Optional[PendingEdit] = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def pending(self) -> Optional[PendingEdit]:
        return self._pending

    @property
    def state(self) -> EditState:
        return EditState.EDITING if self._pending else EditState.DISPLAY

    def set_enabled(self, enabled: bool):
        self._enabled = enabled
        if not enabled and self._pending:
            self.abandon()

    def begin(self, index: int, proxy: TextRunProxy) -> Optional[PendingEdit]:
        if not self._enabled or self._pending is not None:
            return None
        self._pending = PendingEdit(index=index, proxy=proxy)
        return self._pending

    def commit(self, value: str) -> Optional[str]:
        """Close the open edit. Returns the text the proxy should now show.

        Returns None if no edit was open (e.g. Enter already committed and
        the focus-out that follows arrives second).
        """
        pending = self._pending
        if pending is None:
            return None
        # Clear first so a re-entrant commit from the reload is ignored
        self._pending = None
        if value != pending.proxy.text:
            self._apply_edit(pending.proxy, value)
        else:
            logger.debug("Edit unchanged, nothing written")
        return value

    def abandon(self) -> Optional[PendingEdit]:
        pending, self._pending = self._pending, None
        return pending
