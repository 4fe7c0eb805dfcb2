# -*- coding: utf-8 -*-
"""
Classifies the delimiter style of a parts-list text block and finds where its
data rows begin.
"""

import re
from enum import Enum
from typing import List, Optional, Sequence

TEXT_HEADER_WINDOW = 10
DOCUMENT_HEADER_WINDOW = 20

_MULTI_SPACE = re.compile(r" {2,}")

# Row-number column: "NO", "NO.", "PART NO", "PARTNO"
_ROW_NUMBER_TOKEN = re.compile(r"\bno\b|part\s?no")
# "CODE" is sometimes split by glyph joining into "C ODE"
_COLUMN_TOKENS = (
    re.compile(r"c\s?ode"),
    re.compile(r"name"),
    re.compile(r"quantity|qty"),
)


class SourceFormat(Enum):
    """How the columns of a parts-list text block are delimited."""
    PIPE_DELIMITED = "pipe"
    FIXED_WIDTH = "fixed_width"
    CSV = "csv"
    # Never detected; callers choose it for one-value-per-line pastes
    FOUR_LINE_PASTE = "four_line"


def detect_format(text: str) -> SourceFormat:
    """
    Detects the delimiter style of a whole text block.

    Any pipe makes the block pipe-delimited (OCR output). Otherwise runs of two or
    more spaces without commas mean a fixed-width table; everything else is CSV.
    """
    if "|" in text:
        return SourceFormat.PIPE_DELIMITED
    if "," not in text and _MULTI_SPACE.search(text):
        return SourceFormat.FIXED_WIDTH
    return SourceFormat.CSV


def is_header_line(line: str) -> bool:
    """True for a line naming the row-number column and at least two other columns."""
    folded = line.casefold()
    if not _ROW_NUMBER_TOKEN.search(folded):
        return False
    return sum(1 for token in _COLUMN_TOKENS if token.search(folded)) >= 2


def find_header(lines: Sequence[str], window: int) -> Optional[int]:
    """Index of the first header line within the first `window` lines, or None."""
    for i, line in enumerate(lines[:window]):
        if is_header_line(line):
            return i
    return None


def find_data_start(lines: Sequence[str], window: int, default: Optional[int] = None) -> Optional[int]:
    """
    Returns the index of the first line after the header.

    Args:
        lines: The text block split into lines.
        window: How many leading lines may hold the header.
        default: Returned when no header is found. Document text passes None so
            that a missing header reads as "no table"; pasted text passes 0.
    """
    header_index = find_header(lines, window)
    if header_index is None:
        return default
    return header_index + 1


def split_lines(text: str) -> List[str]:
    """Splits a block into lines, keeping blank ones so offsets stay meaningful."""
    return text.strip().splitlines()
