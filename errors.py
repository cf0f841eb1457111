"""
errors.py — Exception hierarchy for the editor shell

Every failure a UI handler can see derives from EditorError, so handlers
catch one type, log it, and leave the last reloaded session untouched.
"""

from __future__ import annotations


class EditorError(Exception):
    """Base class for all editor failures."""


class ParseError(EditorError):
    """A byte buffer could not be parsed as a PDF."""


class PageIndexError(EditorError, IndexError):
    """A 1-based page number outside [1, page_count]."""

    def __init__(self, page_number: int, page_count: int):
        super().__init__(f"page {page_number} is out of range 1..{page_count}")
        self.page_number = page_number
        self.page_count = page_count


class HostIOError(EditorError, OSError):
    """Reading, writing, or a file dialog failed on the host side."""


class SerializationError(EditorError):
    """The document model could not be written back to bytes."""


class RenderError(EditorError):
    """Rasterizing a page or extracting its text runs failed."""


class SessionBusyError(EditorError):
    """A session operation was triggered while another one is still running."""

    def __init__(self, requested: str, running: str):
        super().__init__(f"cannot {requested}: {running} is still in progress")
        self.requested = requested
        self.running = running
