"""
overlay.py — Text overlay builder

Turns a page's text runs into positioned proxies. The proxy carries the
run's original page-space data alongside its on-screen placement; the
edit layer reads the page-space fields, the widgets read the screen ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from geometry import (
    Transform, apply_to_point, as_transform, compose, font_size_of, translation_of,
)
from rendering import TextRun


@dataclass(frozen=True)
class TextRunProxy:
    source_transform: Transform
    composed_transform: Transform
    derived_font_size: float
    width: float
    height: float
    font_name: str
    text: str
    # (x, y, width, height) in viewport pixels, top-left origin
    screen_rect: tuple[float, float, float, float]

    @property
    def anchor(self) -> tuple[float, float]:
        """Baseline start in page space."""
        return translation_of(self.source_transform)

    @property
    def source_font_size(self) -> float:
        return font_size_of(self.source_transform)


def glyph_box(composed: Transform, run: TextRun) -> tuple[float, float, float, float]:
    """Screen bounding box of a run, whatever the page or text rotation.

    In the run's text space one unit is one em: the box spans the run's
    advance, from one em above the baseline down to the bottom of its
    reported height.
    """
    size = font_size_of(run.transform) or 1.0
    right = run.width / size
    bottom = max(1.0, run.height / size) - 1.0
    corners = [apply_to_point(composed, u, v) for u in (0.0, right) for v in (-1.0, bottom)]
    xs = [x for x, _ in corners]
    ys = [y for _, y in corners]
    return (min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def build_proxy(viewport_transform: Sequence[float], run: TextRun) -> TextRunProxy:
    composed = compose(viewport_transform, run.transform)
    font_px = font_size_of(composed)
    return TextRunProxy(
        source_transform=as_transform(run.transform),
        composed_transform=composed,
        derived_font_size=font_px,
        width=run.width,
        height=run.height,
        font_name=run.font_name,
        text=run.text,
        screen_rect=glyph_box(composed, run),
    )


def build_proxies(viewport_transform: Sequence[float],
                  runs: Iterable[TextRun]) -> list[TextRunProxy]:
    """One proxy per run, in run order."""
    return [build_proxy(viewport_transform, run) for run in runs]
