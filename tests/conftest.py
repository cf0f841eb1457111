# tests/conftest.py
import os
import sys
from pathlib import Path

import fitz  # PyMuPDF
import pytest

# Make the top-level modules importable without installing
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from render_controller import PageRenderController
from rendering import RasterView
from session import DocumentSession

PAGE_W, PAGE_H = 612, 792


def make_pdf(pages, size=(PAGE_W, PAGE_H), rotation=0) -> bytes:
    """pages: one list per page of ((x, y), text, fontsize), y top-down.

    Text goes in on the unrotated page; /Rotate is set afterwards.
    """
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page(width=size[0], height=size[1])
        for point, text, fontsize in lines:
            page.insert_text(point, text, fontsize=fontsize, fontname="helv")
        if rotation:
            page.set_rotation(rotation)
    data = doc.tobytes()
    doc.close()
    return data


def page_texts(data: bytes, number: int) -> list[str]:
    view = RasterView.parse(data)
    try:
        return [run.text for run in view.page(number).text_runs()]
    finally:
        view.close()


class RecordingSurface:
    """Stands in for the main window; records what the renderer shows."""

    def __init__(self):
        self.pages = []          # (width, height) per show_page call
        self.overlays = []       # proxy lists per show_overlay call
        self.thumbnails = []     # pixmap lists per show_thumbnails call
        self.selected = None
        self.actions = None
        self.cleared = 0
        self.on_show_page = None

    def show_page(self, pixmap, width, height):
        self.pages.append((width, height))
        if self.on_show_page:
            self.on_show_page()

    def show_overlay(self, proxies):
        self.overlays.append(list(proxies))

    def show_thumbnails(self, pixmaps):
        self.thumbnails.append(list(pixmaps))

    def select_thumbnail(self, page_number):
        self.selected = page_number

    def set_page_actions(self, actions):
        self.actions = actions

    def clear(self):
        self.cleared += 1


class FakeHost:
    def __init__(self, path="modified.pdf"):
        self.path = path
        self.saved = []

    def save(self, data):
        self.saved.append(data)
        return self.path


@pytest.fixture
def three_page_pdf():
    return make_pdf([
        [((72, 100), "Page 1", 12)],
        [((72, 100), "Page 2", 12), ((100, 700), "Hello", 12)],
        [((72, 100), "Page 3", 12)],
    ])


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def renderer(surface):
    return PageRenderController(surface)


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def session(renderer, host):
    return DocumentSession(renderer, host)


@pytest.fixture
def loaded(session, three_page_pdf):
    session.load(three_page_pdf)
    return session


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
