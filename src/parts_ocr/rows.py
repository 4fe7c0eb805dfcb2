# -*- coding: utf-8 -*-
"""
Per-format strategies turning one candidate line into a PartRecord.

Each strategy is a pure function from a pre-filtered line to a record (or None).
`parse_row` applies the noise filter, dispatches on the detected format and
rejects rows whose number is not an integer.
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from .detect import SourceFormat
from .records import BULLET_GLYPHS, DEFAULT_PMST, DEFAULT_QTY, PartRecord

logger = logging.getLogger(__name__)

MIN_LINE_LENGTH = 5

PART_CODE_PATTERN = re.compile(r"\d{3}-\d{3}-\d{4}-\d{2}")

_MULTI_SPACE = re.compile(r"\s{2,}")
_SEPARATOR_LINE = re.compile(r"^[-=_]+$")
# Page locators such as "40- 2-1"
_PAGE_LOCATOR = re.compile(r"^\d+[-–]\s*\d+[-–]\d+$")
_LABEL_FRAGMENTS = ("unit name", "draw no", "part code", "part name", "quantity")
# A quoted value or a run up to the next comma/tab
_CSV_FIELD = re.compile(r'\s*(".*?"|[^,\t]+)(?=\s*[,\t]|\s*$)')
_BULLET = re.compile(f"^[{BULLET_GLYPHS}]")
_INTEGER = re.compile(r"[+-]?\d+")
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")

RowStrategy = Callable[[str], Optional[PartRecord]]


def is_noise_line(line: str, min_length: int = MIN_LINE_LENGTH) -> bool:
    """True for lines that can never be a parts row (short, rules, page locators, labels)."""
    if len(line) < min_length:
        return True
    if _SEPARATOR_LINE.match(line) or _PAGE_LOCATOR.match(line):
        return True
    lowered = line.lower()
    return any(label in lowered for label in _LABEL_FRAGMENTS)


def strip_bullet(number: str) -> str:
    """Removes one leading bullet glyph."""
    return _BULLET.sub("", number.strip(), count=1).strip()


def is_row_number(number: str) -> bool:
    return bool(_INTEGER.fullmatch(strip_bullet(number)))


def is_numeric_token(token: str) -> bool:
    return bool(_NUMBER.fullmatch(token.strip()))


def split_columns(text: str) -> List[str]:
    """Splits on runs of two or more whitespace characters."""
    return [f.strip() for f in _MULTI_SPACE.split(text) if f.strip()]


def split_trailing_quantity(field: str) -> Tuple[str, str]:
    """
    Splits "NAME QTY" into (name, qty).

    OCR output puts the quantity as the last token of the name column. When that
    token is not numeric the whole field is the name and the quantity is "1".
    """
    tokens = field.split()
    if tokens and is_numeric_token(tokens[-1]):
        return " ".join(tokens[:-1]), tokens[-1]
    return field.strip(), DEFAULT_QTY


def tokenize_csv(line: str) -> List[str]:
    """Splits on commas or tabs, keeping quoted values whole and unquoting them."""
    fields = (re.sub(r'^"|"$', "", f.strip()).strip() for f in _CSV_FIELD.findall(line))
    return [f for f in fields if f]


def fields_to_record(fields: List[str]) -> Optional[PartRecord]:
    """
    Maps a generic delimited row by field count.

    3 fields: number, code, name. 4 fields add the quantity, 5 or more add PMST.
    """
    if len(fields) < 3:
        return None
    number, code, name = fields[:3]
    qty = fields[3] if len(fields) >= 4 else DEFAULT_QTY
    pmst = fields[4] if len(fields) >= 5 else DEFAULT_PMST
    return PartRecord(number=number, code=code, name=name, qty=qty, pmst=pmst)


def parse_pipe_line(line: str) -> Optional[PartRecord]:
    """
    Parses the two-column OCR layout: "NO CODE | NAME QTY [| PMST]".

    Example: "1 000-102-3574-29 | BASE :WDU: 1"
    """
    fields = [f.strip() for f in line.split("|") if f.strip()]
    if len(fields) < 2:
        return None

    first_parts = fields[0].split()
    if len(first_parts) < 2:
        return None
    number, code = first_parts[0], " ".join(first_parts[1:])

    name, qty = split_trailing_quantity(fields[1])
    pmst = fields[2] if len(fields) > 2 else DEFAULT_PMST
    return PartRecord(number=number, code=code, name=name, qty=qty, pmst=pmst)


def parse_fixed_width_line(line: str) -> Optional[PartRecord]:
    """
    Parses a row of a table laid out with space runs.

    A part code like 000-128-2893-16 anchors the row: text before it is the number
    and the rest splits into name and quantity. Without a code the columns are
    taken positionally as number, name, quantity.
    """
    match = PART_CODE_PATTERN.search(line)
    if match:
        number = line[:match.start()].strip()
        after_fields = split_columns(line[match.end():])
        name = after_fields[0] if after_fields else ""
        qty = after_fields[1] if len(after_fields) > 1 else ""
        return PartRecord(number=number, code=match.group(0), name=name, qty=qty)

    fields = split_columns(line)
    if not fields:
        return None
    return PartRecord(
        number=fields[0],
        name=fields[1] if len(fields) > 1 else "",
        qty=fields[2] if len(fields) > 2 else "",
    )


def parse_csv_line(line: str) -> Optional[PartRecord]:
    return fields_to_record(tokenize_csv(line))


def parse_column_line(line: str) -> Optional[PartRecord]:
    """Maps a row split on space runs by field count, like a delimited row."""
    return fields_to_record(split_columns(line))


# Document text: fixed-width rows are anchored on the part code
ROW_STRATEGIES: Dict[SourceFormat, RowStrategy] = {
    SourceFormat.PIPE_DELIMITED: parse_pipe_line,
    SourceFormat.FIXED_WIDTH: parse_fixed_width_line,
    SourceFormat.CSV: parse_csv_line,
}

# Pasted text: fixed-width columns are NO, CODE, NAME, QTY, PMST in order
TEXT_ROW_STRATEGIES: Dict[SourceFormat, RowStrategy] = {
    **ROW_STRATEGIES,
    SourceFormat.FIXED_WIDTH: parse_column_line,
}


def parse_row(
    line: str,
    source_format: SourceFormat,
    min_length: int = MIN_LINE_LENGTH,
    strategies: Optional[Dict[SourceFormat, RowStrategy]] = None,
) -> Optional[PartRecord]:
    """
    Parses one line into a validated PartRecord.

    Returns None for noise lines, lines the strategy cannot split, and rows whose
    number is not an integer once a leading bullet is removed.

    Args:
        line: One line of text.
        source_format: Detected or forced format of the whole block.
        min_length: Shorter lines are noise.
        strategies: Format-to-strategy table; `ROW_STRATEGIES` (document text)
            when omitted, `TEXT_ROW_STRATEGIES` for pasted text.

    Raises:
        ValueError: if `source_format` has no line strategy (four-line pastes are
            parsed in groups, see `parts_ocr.toc`).
    """
    try:
        strategy = (strategies or ROW_STRATEGIES)[source_format]
    except KeyError:
        raise ValueError(f"No line strategy for {source_format.name}") from None

    line = line.strip()
    if is_noise_line(line, min_length):
        return None

    record = strategy(line)
    if record is None:
        return None

    number = strip_bullet(record.number)
    if not _INTEGER.fullmatch(number):
        logger.debug("Skipping non-numeric part number: %r", record.number)
        return None
    record.number = number
    return record
