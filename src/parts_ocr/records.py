# -*- coding: utf-8 -*-
"""
Data model shared by the parts-list extraction engine.

Everything here is produced fresh per parse call; nothing is cached between calls.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

BULLET_GLYPHS = "●○•"

PARTS_HEADERS = ["NO", "PART CODE", "PART NAME", "QUANTITY"]
PARTS_HEADERS_WITH_PMST = PARTS_HEADERS + ["PMST"]

DEFAULT_QTY = "1"
DEFAULT_PMST = "3"
MISSING_VALUE = "N/A"


class ExtractionError(Exception):
    """Base class for parts extraction failures surfaced to callers."""


class NoEntriesParsedError(ExtractionError):
    """Raised when a four-line paste produced no entries at all."""


class NoTableFoundError(ExtractionError):
    """Raised when a whole document yielded no parts rows."""


class DocumentError(ExtractionError):
    """Raised when a document cannot be opened or read."""


class ExtractionCancelled(ExtractionError):
    """Raised when a caller cancels a multi-page extraction between pages."""


class RowShape(Enum):
    """Output shape of a parts parse."""
    LIST = "list"
    MAP = "map"


@dataclass(frozen=True)
class GlyphFragment:
    """A positioned run of text from a page's text layer. `y` grows upwards."""
    x: float
    y: float
    text: str


@dataclass
class PartRecord:
    """One parts-list row.

    `number` is the catalog number printed in the NO column. `position` is the
    1-based place of the row in an ordered list and is only set for list-shaped
    results; it is never used as a key.
    """
    number: str
    code: str = ""
    name: str = ""
    qty: str = DEFAULT_QTY
    pmst: str = DEFAULT_PMST
    position: Optional[int] = None

    def as_row(self, headers: Optional[List[str]] = None, positional: bool = False) -> Dict[str, str]:
        """Returns the record keyed by column header."""
        number = str(self.position) if positional and self.position is not None else self.number
        values = {
            "NO": number,
            "PART CODE": self.code,
            "PART NAME": self.name,
            "QUANTITY": self.qty,
            "PMST": self.pmst,
        }
        return {h: values[h] for h in (headers or PARTS_HEADERS_WITH_PMST)}


@dataclass(frozen=True)
class TocEntry:
    index: int
    page_ref: str
    unit_name: str
    draw_no: str

    @property
    def display_name(self) -> str:
        return f"{self.page_ref} - {self.unit_name} - {self.draw_no}"


@dataclass
class ParseResult:
    """Headers plus rows, either as an ordered list or keyed by part number."""
    headers: List[str] = field(default_factory=lambda: list(PARTS_HEADERS))
    rows: Union[List[PartRecord], Dict[str, PartRecord]] = field(default_factory=list)

    @property
    def shape(self) -> RowShape:
        return RowShape.MAP if isinstance(self.rows, dict) else RowShape.LIST

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 0

    def records(self) -> List[PartRecord]:
        """Rows as a list regardless of shape."""
        if isinstance(self.rows, dict):
            return list(self.rows.values())
        return list(self.rows)

    def __len__(self) -> int:
        return len(self.rows)
