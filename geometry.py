"""
geometry.py — 2D affine transform helpers for the text overlay

Transforms are 6-tuples (a, b, c, d, e, f) in PDF matrix order:
    x' = a*x + c*y + e
    y' = b*x + d*y + f
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

Transform = tuple[float, float, float, float, float, float]

IDENTITY: Transform = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def as_transform(values: Sequence[float]) -> Transform:
    if len(values) != 6:
        raise ValueError(f"an affine transform needs 6 coefficients, got {len(values)}")
    a, b, c, d, e, f = (float(v) for v in values)
    return (a, b, c, d, e, f)


def scale_transform(sx: float, sy: Optional[float] = None) -> Transform:
    return (float(sx), 0.0, 0.0, float(sx if sy is None else sy), 0.0, 0.0)


def compose(m1: Sequence[float], m2: Sequence[float]) -> Transform:
    """Return m1 × m2: a point is mapped by m2 first, then by m1.

    Called as compose(viewport, run) this takes a run's text space straight
    to screen pixels.
    """
    a1, b1, c1, d1, e1, f1 = m1
    a2, b2, c2, d2, e2, f2 = m2
    return (
        a1 * a2 + c1 * b2,
        b1 * a2 + d1 * b2,
        a1 * c2 + c1 * d2,
        b1 * c2 + d1 * d2,
        a1 * e2 + c1 * f2 + e1,
        b1 * e2 + d1 * f2 + f1,
    )


def font_size_of(transform: Sequence[float]) -> float:
    """Effective font height under a transform, independent of rotation."""
    return math.hypot(transform[2], transform[3])


def apply_to_point(transform: Sequence[float], x: float, y: float) -> tuple[float, float]:
    a, b, c, d, e, f = transform
    return (a * x + c * y + e, b * x + d * y + f)


def translation_of(transform: Sequence[float]) -> tuple[float, float]:
    return (float(transform[4]), float(transform[5]))
