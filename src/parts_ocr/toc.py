# -*- coding: utf-8 -*-
"""
Parsers for pasted text that holds one value per line in groups of four.

Table of contents:   page ref / unit name / part code (ignored) / drawing number
Parts list paste:    number / part code / part name / quantity

A trailing group of fewer than four lines is ignored.
"""

import logging
from typing import Dict, Iterator, List, Mapping, Sequence, Tuple, TypeVar

from .records import (
    DEFAULT_PMST,
    DEFAULT_QTY,
    MISSING_VALUE,
    PARTS_HEADERS,
    NoEntriesParsedError,
    ParseResult,
    PartRecord,
    RowShape,
    TocEntry,
)
from .rows import is_row_number, strip_bullet

logger = logging.getLogger(__name__)

LINES_PER_ENTRY = 4

T = TypeVar("T")

TOC_FORMAT_HINT = (
    "Expected 4 lines per entry:\n"
    "Line 1: Page number (e.g. 10-1)\n"
    "Line 2: Unit name\n"
    "Line 3: Part code\n"
    "Line 4: Draw number"
)
PARTS_FORMAT_HINT = (
    "Expected 4 lines per part:\n"
    "Line 1: Part Number\n"
    "Line 2: Part Code\n"
    "Line 3: Part Name\n"
    "Line 4: Quantity"
)


def paste_lines(text: str) -> List[str]:
    """Trimmed, non-empty lines of a pasted block."""
    return [line.strip() for line in text.strip().splitlines() if line.strip()]


def iter_groups(lines: Sequence[str], size: int = LINES_PER_ENTRY) -> Iterator[Tuple[str, ...]]:
    """Yields consecutive complete groups of `size` lines."""
    for i in range(0, len(lines) - size + 1, size):
        yield tuple(lines[i:i + size])


def parse_toc_lines(lines: Sequence[str]) -> List[TocEntry]:
    entries: List[TocEntry] = []
    for page_ref, unit_name, _part_code, draw_no in iter_groups(lines):
        page_ref, unit_name, draw_no = page_ref.strip(), unit_name.strip(), draw_no.strip()
        if not (page_ref and unit_name and draw_no):
            logger.debug("Skipping incomplete TOC group starting at %r", page_ref)
            continue
        entries.append(TocEntry(index=len(entries), page_ref=page_ref, unit_name=unit_name, draw_no=draw_no))
    return entries


def parse_toc_text(text: str) -> List[TocEntry]:
    """
    Parses a pasted table of contents.

    Example:
        >>> parse_toc_text("10-1\\nMAIN BODY UNIT\\n000-128-2893-16\\n4D-38837")[0].display_name
        '10-1 - MAIN BODY UNIT - 4D-38837'
    """
    return parse_toc_lines(paste_lines(text))


def parse_four_line_parts(text: str, shape: RowShape = RowShape.LIST) -> ParseResult:
    """
    Parses a parts list pasted one value per line.

    A missing number is replaced by the running row count; a group without a part
    code is skipped. Missing names become "N/A" and missing quantities "1".
    """
    records: List[PartRecord] = []
    for number, code, name, qty in iter_groups(paste_lines(text)):
        if not code:
            continue
        number = strip_bullet(number) or str(len(records) + 1)
        if not is_row_number(number):
            logger.debug("Skipping non-numeric part number: %r", number)
            continue
        records.append(PartRecord(
            number=number,
            code=code,
            name=name or MISSING_VALUE,
            qty=qty or DEFAULT_QTY,
            pmst=DEFAULT_PMST,
        ))

    if shape is RowShape.MAP:
        return ParseResult(headers=list(PARTS_HEADERS), rows={r.number: r for r in records})
    for position, record in enumerate(records, start=1):
        record.position = position
    return ParseResult(headers=list(PARTS_HEADERS), rows=records)


def require_entries(entries: Sequence[T], hint: str = TOC_FORMAT_HINT) -> Sequence[T]:
    """
    Returns `entries` unchanged, or raises when nothing was parsed.

    Raises:
        NoEntriesParsedError: if `entries` is empty.
    """
    if len(entries) == 0:
        raise NoEntriesParsedError(f"Could not parse any entries. Please check the format.\n\n{hint}")
    return entries


def map_pages(entries: Sequence[TocEntry], page_mappings: Mapping[int, int]) -> Dict[int, TocEntry]:
    """
    Resolves {page number: TOC index} into {page number: TocEntry}.

    Mappings pointing at an index that does not exist are dropped with a warning.
    """
    by_index = {entry.index: entry for entry in entries}
    resolved: Dict[int, TocEntry] = {}
    for page_num, toc_index in sorted(page_mappings.items()):
        entry = by_index.get(toc_index)
        if entry is None:
            logger.warning("Page %s maps to unknown TOC entry %s", page_num, toc_index)
            continue
        resolved[page_num] = entry
    return resolved
