# -*- coding: utf-8 -*-
import json
import logging
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "parts_ocr.json"


@dataclass
class ExtractionSettings:
    """Holds the tunable constants of the extraction heuristics."""
    # Glyph joining, in page units between fragment anchors
    join_gap: float = 20.0
    column_gap: float = 40.0

    # Row filtering
    min_line_length: int = 5

    # Header scan windows
    text_header_window: int = 10
    document_header_window: int = 20

    # OCR fallback for image-only documents
    render_scale: float = 2.0
    ocr_lang: str = "en"
    ocr_row_height_ratio: float = 0.5


def load_config(path: str = DEFAULT_CONFIG_PATH) -> ExtractionSettings:
    """Loads settings from a JSON file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
            return ExtractionSettings(**data)
    except (FileNotFoundError, json.JSONDecodeError, TypeError) as exc:
        # Missing, corrupt, or stale files fall back to defaults
        logger.debug("Using default extraction settings (%s): %s", path, exc)
        return ExtractionSettings()


def save_config(settings: ExtractionSettings, path: str = DEFAULT_CONFIG_PATH):
    """Saves settings to a JSON file."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(asdict(settings), f, indent=4)
