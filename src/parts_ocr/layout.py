# -*- coding: utf-8 -*-
"""
This module rebuilds text lines from positioned text fragments.
Fragments come either from a document's text layer or from OCR results; in both
cases the output is plain text where a double space marks a column boundary.
"""

import logging
import math
import re
from numbers import Real
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .records import GlyphFragment

logger = logging.getLogger(__name__)

# Define a type for a single OCR item, which includes the bounding box, text, and score.
# Bbox can be List[List[int]] (four points) or List[int] (x1, y1, x2, y2).
OcrItem = Tuple[Union[List[List[int]], List[int]], Tuple[str, float]]
OcrResult = List[OcrItem]

GlyphLike = Union[GlyphFragment, Mapping[str, Any]]

JOIN_GAP = 20.0
COLUMN_GAP = 40.0

# "C O V E R" left over after gap joining; a two-space column boundary is kept
_SPACED_CAPITALS = re.compile(r"\b([A-Z]) (?=[A-Z]\b)")


def normalize_bbox(bbox: Union[List[List[int]], List[int]]) -> Dict[str, float]:
    """
    Normalizes a bounding box into a dictionary with center coordinates, width, and height.
    This handles both 4-point polygons and 2-point rectangle formats.

    Args:
        bbox: The bounding box, either as [[x1,y1],[x2,y2],[x3,y3],[x4,y4]] or [x1,y1,x2,y2].

    Returns:
        A dictionary with keys 'cx', 'cy', 'w', 'h', 'x1', 'y1', 'x2', 'y2'.
    """
    if isinstance(bbox[0], (list, tuple)):  # Polygon format [[x1,y1],...]
        x_coords = [p[0] for p in bbox]
        y_coords = [p[1] for p in bbox]
        x1, y1 = min(x_coords), min(y_coords)
        x2, y2 = max(x_coords), max(y_coords)
    else:  # Rectangle format [x1,y1,x2,y2]
        x1, y1, x2, y2 = bbox

    width = x2 - x1
    height = y2 - y1
    return {
        'cx': x1 + width / 2,
        'cy': y1 + height / 2,
        'w': width,
        'h': height,
        'x1': x1,
        'y1': y1,
        'x2': x2,
        'y2': y2,
    }


def _is_coordinate(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def coerce_fragment(item: GlyphLike) -> Optional[GlyphFragment]:
    """Returns a GlyphFragment, or None when text or position is missing."""
    if isinstance(item, GlyphFragment):
        text, x, y = item.text, item.x, item.y
    elif isinstance(item, Mapping):
        text, x, y = item.get("text"), item.get("x"), item.get("y")
    else:
        text, x, y = (getattr(item, name, None) for name in ("text", "x", "y"))

    if not isinstance(text, str) or not text:
        return None
    if not _is_coordinate(x) or not _is_coordinate(y):
        return None
    if isinstance(item, GlyphFragment):
        return item
    return GlyphFragment(x=float(x), y=float(y), text=text)


def separator_for_gap(gap: float, join_gap: float = JOIN_GAP, column_gap: float = COLUMN_GAP) -> str:
    """
    Chooses the text inserted between two fragments on the same line.

    Gaps are measured anchor to anchor. Below `join_gap` the fragments are treated
    as pieces of one word, below `column_gap` as separate words, and anything wider
    as a column boundary.
    """
    if gap < join_gap:
        return ""
    if gap < column_gap:
        return " "
    return "  "


def collapse_spaced_capitals(line: str) -> str:
    return _SPACED_CAPITALS.sub(r"\1", line)


def _line_bucket(y: float) -> int:
    # Round half up, so 10.5 and 11.4 share a bucket
    return math.floor(y + 0.5)


def reconstruct_lines(
    fragments: Iterable[GlyphLike],
    join_gap: float = JOIN_GAP,
    column_gap: float = COLUMN_GAP,
) -> List[str]:
    """
    Rebuilds the text lines of one page, top of page first.

    Args:
        fragments: Unordered fragments of one page with `y` measured bottom-up.
        join_gap: Anchor distance below which fragments are joined without a space.
        column_gap: Anchor distance at or above which two spaces are inserted.

    Returns:
        Non-empty lines in reading order.
    """
    buckets: Dict[int, List[GlyphFragment]] = {}
    for item in fragments:
        fragment = coerce_fragment(item)
        if fragment is None:
            logger.warning("Skipping malformed glyph fragment: %r", item)
            continue
        buckets.setdefault(_line_bucket(fragment.y), []).append(fragment)

    lines = []
    for y in sorted(buckets, reverse=True):
        row = sorted(buckets[y], key=lambda f: f.x)
        line_str = row[0].text
        for prev_item, current_item in zip(row, row[1:]):
            line_str += separator_for_gap(current_item.x - prev_item.x, join_gap, column_gap)
            line_str += current_item.text
        if line_str.strip():
            lines.append(collapse_spaced_capitals(line_str))
    return lines


def reconstruct_document(
    pages: Iterable[Iterable[GlyphLike]],
    join_gap: float = JOIN_GAP,
    column_gap: float = COLUMN_GAP,
) -> str:
    """Reconstructs every page in order and joins their lines into one text block."""
    lines: List[str] = []
    for page_no, page in enumerate(pages, start=1):
        page_lines = reconstruct_lines(page, join_gap, column_gap)
        logger.debug("Page %d - grouped into %d lines", page_no, len(page_lines))
        lines.extend(page_lines)
    return "\n".join(lines)


def cluster_rows(ocr_result: OcrResult, row_height_ratio: float = 0.5) -> List[List[Dict[str, Any]]]:
    """
    Groups OCR items into visual rows, top to bottom.

    Items whose vertical center lies within `row_height_ratio` times the average
    item height of the running row average belong to the same row.
    """
    items = [{'text': item[1][0], 'norm_bbox': normalize_bbox(item[0])} for item in ocr_result]
    if not items:
        return []

    avg_h = sum(it['norm_bbox']['h'] for it in items) / len(items)
    row_y_tolerance = avg_h * row_height_ratio

    items.sort(key=lambda x: x['norm_bbox']['cy'])

    rows = []
    current_row = [items[0]]
    for item in items[1:]:
        avg_row_y = sum(i['norm_bbox']['cy'] for i in current_row) / len(current_row)
        if abs(item['norm_bbox']['cy'] - avg_row_y) < row_y_tolerance:
            current_row.append(item)
        else:
            rows.append(sorted(current_row, key=lambda x: x['norm_bbox']['x1']))
            current_row = [item]
    rows.append(sorted(current_row, key=lambda x: x['norm_bbox']['x1']))
    return rows


def ocr_items_to_fragments(
    ocr_result: OcrResult,
    image_height: float,
    scale: float = 1.0,
    row_height_ratio: float = 0.5,
) -> List[GlyphFragment]:
    """
    Converts OCR items from image space into glyph fragments.

    Image coordinates grow downwards, so each row's mean center is flipped against
    `image_height`. Dividing by `scale` maps rendered pixels back onto page units,
    which keeps the joining gaps meaningful. Every item of a clustered row gets the
    same `y`, so OCR jitter does not split a row across lines.

    Args:
        ocr_result: Items as returned by `OCREngine.recognize`.
        image_height: Height in pixels of the recognized image.
        scale: Render scale used to produce the image.
        row_height_ratio: Row clustering tolerance, relative to average item height.
    """
    fragments: List[GlyphFragment] = []
    for row in cluster_rows(ocr_result, row_height_ratio):
        row_cy = sum(it['norm_bbox']['cy'] for it in row) / len(row)
        y = (image_height - row_cy) / scale
        for it in row:
            if not it['text']:
                continue
            fragments.append(GlyphFragment(x=it['norm_bbox']['x1'] / scale, y=y, text=it['text']))
    return fragments


def page_has_text(fragments: Sequence[GlyphLike]) -> bool:
    """True when at least one fragment carries visible text."""
    for item in fragments:
        fragment = coerce_fragment(item)
        if fragment is not None and fragment.text.strip():
            return True
    return False
