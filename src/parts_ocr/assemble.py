# -*- coding: utf-8 -*-
"""
Turns a text block into a ParseResult.

Two entry points exist because the two sources behave differently:

* `parse_document_text` handles text reconstructed from a document. The header
  must appear within the first 20 lines; without it the document holds no table.
* `parse_parts_text` handles pasted or uploaded text. The header is optional.

Both return either an ordered list (duplicates kept, rows carry a positional
index) or a map keyed by part number (last duplicate wins).
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from .detect import SourceFormat, detect_format, find_data_start, split_lines
from .layout import GlyphLike, reconstruct_document
from .records import (
    DEFAULT_PMST,
    DEFAULT_QTY,
    MISSING_VALUE,
    PARTS_HEADERS,
    PARTS_HEADERS_WITH_PMST,
    ParseResult,
    PartRecord,
    RowShape,
)
from .rows import MIN_LINE_LENGTH, TEXT_ROW_STRATEGIES, RowStrategy, parse_row
from .settings import ExtractionSettings
from .toc import parse_four_line_parts

logger = logging.getLogger(__name__)


def iter_records(
    lines: Sequence[str],
    source_format: SourceFormat,
    start: int = 0,
    min_length: int = MIN_LINE_LENGTH,
    strategies: Optional[Dict[SourceFormat, RowStrategy]] = None,
) -> Iterator[PartRecord]:
    """Yields the valid records among `lines[start:]`."""
    for line in lines[start:]:
        record = parse_row(line, source_format, min_length, strategies)
        if record is not None:
            yield record


def assemble(records: Iterable[PartRecord], shape: RowShape, headers: List[str], fill_missing: bool = False) -> ParseResult:
    """
    Collects records into the requested shape.

    In list shape every record keeps its place and gets a 1-based `position`.
    In map shape records are keyed by `number` and a later duplicate replaces an
    earlier one. `fill_missing` substitutes "N/A" for empty code/name and the
    defaults for empty quantity/PMST.
    """
    if shape is RowShape.MAP:
        keyed: Dict[str, PartRecord] = {}
        for record in records:
            if fill_missing:
                record = _with_defaults(record)
            if record.number in keyed:
                logger.debug("Part %s listed again, replacing earlier row", record.number)
            keyed[record.number] = record
        return ParseResult(headers=list(headers), rows=keyed)

    rows = [_with_defaults(r) if fill_missing else r for r in records]
    return ParseResult(headers=list(headers), rows=renumber(rows))


def _with_defaults(record: PartRecord) -> PartRecord:
    record.code = record.code or MISSING_VALUE
    record.name = record.name or MISSING_VALUE
    record.qty = record.qty or DEFAULT_QTY
    record.pmst = record.pmst or DEFAULT_PMST
    return record


def parse_document_text(
    text: str,
    shape: RowShape = RowShape.LIST,
    settings: Optional[ExtractionSettings] = None,
) -> ParseResult:
    """
    Parses text reconstructed from a document's text layer or OCR.

    Returns a result with no rows when no header line appears within the
    document header window.
    """
    settings = settings or ExtractionSettings()
    lines = split_lines(text)
    start = find_data_start(lines, settings.document_header_window)
    if start is None:
        logger.info("No parts table header found in the first %d lines", settings.document_header_window)
        return ParseResult(headers=list(PARTS_HEADERS), rows={} if shape is RowShape.MAP else [])

    source_format = detect_format(text)
    logger.debug("Document rows start at line %d, format %s", start, source_format.name)
    records = iter_records(lines, source_format, start, settings.min_line_length)
    return assemble(records, shape, PARTS_HEADERS)


def parse_document_pages(
    pages: Iterable[Iterable[GlyphLike]],
    shape: RowShape = RowShape.LIST,
    settings: Optional[ExtractionSettings] = None,
) -> ParseResult:
    """Reconstructs glyph pages and parses the resulting text."""
    settings = settings or ExtractionSettings()
    text = reconstruct_document(pages, settings.join_gap, settings.column_gap)
    return parse_document_text(text, shape, settings)


def parse_parts_text(
    text: str,
    shape: RowShape = RowShape.MAP,
    settings: Optional[ExtractionSettings] = None,
    source_format: Optional[SourceFormat] = None,
) -> ParseResult:
    """
    Parses pasted or uploaded parts-list text.

    Args:
        text: The raw text.
        shape: List or map output.
        settings: Heuristic constants; defaults when omitted.
        source_format: Forces a format. FOUR_LINE_PASTE must be chosen here since
            it is never detected.
    """
    if source_format is SourceFormat.FOUR_LINE_PASTE:
        return parse_four_line_parts(text, shape)

    settings = settings or ExtractionSettings()
    source_format = source_format or detect_format(text)
    lines = split_lines(text)
    start = find_data_start(lines, settings.text_header_window, default=0)
    logger.debug("Text rows start at line %d, format %s", start, source_format.name)
    records = iter_records(lines, source_format, start, settings.min_line_length, TEXT_ROW_STRATEGIES)
    result = assemble(records, shape, PARTS_HEADERS_WITH_PMST, fill_missing=True)
    logger.info("Total parts parsed: %d", len(result))
    return result


def renumber(rows: Iterable[PartRecord]) -> List[PartRecord]:
    """Copies of `rows` with 1-based positions in list order. The catalog number is untouched."""
    return [replace(row, position=position) for position, row in enumerate(rows, start=1)]


def delete_row(rows: Sequence[PartRecord], index: int) -> List[PartRecord]:
    """
    Returns a new list without `rows[index]`, renumbered.

    Raises:
        IndexError: if `index` is out of range.
    """
    if not -len(rows) <= index < len(rows):
        raise IndexError(f"Row index {index} out of range for {len(rows)} rows")
    index %= len(rows)
    return renumber(row for i, row in enumerate(rows) if i != index)


def add_row(rows: Sequence[PartRecord]) -> List[PartRecord]:
    """Returns a new list with an empty row appended, numbered after the last position."""
    new_number = str(len(rows) + 1)
    return renumber(list(rows) + [PartRecord(number=new_number, qty=DEFAULT_QTY)])


def rows_to_map(rows: Iterable[PartRecord]) -> Dict[str, PartRecord]:
    """
    Keys list-shaped rows by part number for import into a diagram.

    Rows without a number are skipped. Quantity defaults to "1" and PMST is reset
    to "3" since document tables carry no PMST column.
    """
    parts: Dict[str, PartRecord] = {}
    for row in rows:
        if not row.number:
            continue
        parts[row.number] = PartRecord(
            number=row.number,
            code=row.code,
            name=row.name,
            qty=row.qty or DEFAULT_QTY,
            pmst=DEFAULT_PMST,
        )
    return parts
