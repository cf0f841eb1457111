"""
config.py — Application constants and environment overrides

Nothing here is persisted; the only knobs are environment variables read
once at startup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

APP_NAME = "PDF Overlay Editor"
ORG_NAME = "PDFOverlayEditor"

# Zoom factors for the two render call sites
MAIN_ZOOM = 1.5
THUMBNAIL_ZOOM = 0.3

# Replacement text is always drawn with this Base-14 font
EDIT_FONT = "Helvetica"

# Cover rectangle padding: page units horizontally, font-size fractions vertically
COVER_PAD_X = 1.0
COVER_PAD_BELOW = 0.3
COVER_PAD_ABOVE = 0.2

# New pages are A4 in points
DEFAULT_PAGE_SIZE = (595.28, 841.89)

WINDOW_SIZE = (800, 600)
SAVE_DEFAULT_NAME = "modified.pdf"
PDF_FILE_FILTER = "PDFs (*.pdf)"

BUNDLED_SAMPLE = Path(__file__).resolve().parent / "sample.pdf"

ENV_SAMPLE_PDF = "PDFEDIT_SAMPLE_PDF"
ENV_LOG_LEVEL = "PDFEDIT_LOG_LEVEL"


@dataclass(frozen=True)
class AppConfig:
    sample_pdf: Path = BUNDLED_SAMPLE
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        sample = env.get(ENV_SAMPLE_PDF)
        level_name = env.get(ENV_LOG_LEVEL, "INFO").strip().upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            level = logging.INFO
        return cls(
            sample_pdf=Path(sample) if sample else BUNDLED_SAMPLE,
            log_level=level,
        )
