# -*- coding: utf-8 -*-
"""
Parts OCR - parts-list and table-of-contents extraction for parts manuals.

This package turns text-layer glyphs, OCR output, or pasted text into parts
records (NO / PART CODE / PART NAME / QUANTITY / PMST) and table-of-contents
entries. The OCR engine lives in `parts_ocr.ocr_engine` and is imported on
demand so that the parsers work without PaddleOCR loaded.
"""

__version__ = "1.0.0"
__author__ = "Parts OCR Team"

from .records import (
    DocumentError,
    ExtractionCancelled,
    ExtractionError,
    GlyphFragment,
    NoEntriesParsedError,
    NoTableFoundError,
    ParseResult,
    PartRecord,
    RowShape,
    TocEntry,
)
from .settings import ExtractionSettings, load_config, save_config
from .layout import reconstruct_document, reconstruct_lines
from .detect import SourceFormat, detect_format
from .rows import parse_row
from .toc import map_pages, parse_four_line_parts, parse_toc_text, require_entries
from .assemble import (
    add_row,
    delete_row,
    parse_document_pages,
    parse_document_text,
    parse_parts_text,
    rows_to_map,
)
from .export import to_csv

__all__ = [
    "DocumentError",
    "ExtractionCancelled",
    "ExtractionError",
    "GlyphFragment",
    "NoEntriesParsedError",
    "NoTableFoundError",
    "ParseResult",
    "PartRecord",
    "RowShape",
    "TocEntry",
    "ExtractionSettings",
    "load_config",
    "save_config",
    "reconstruct_document",
    "reconstruct_lines",
    "SourceFormat",
    "detect_format",
    "parse_row",
    "map_pages",
    "parse_four_line_parts",
    "parse_toc_text",
    "require_entries",
    "add_row",
    "delete_row",
    "parse_document_pages",
    "parse_document_text",
    "parse_parts_text",
    "rows_to_map",
    "to_csv",
]
