# -*- coding: utf-8 -*-
"""CSV rendering of parse results."""

import csv
import io

from .records import ParseResult


def to_csv(result: ParseResult, positional: bool = False) -> str:
    """
    Renders a result as CSV text with a header row.

    Args:
        result: List- or map-shaped result.
        positional: Write the row position instead of the catalog number in the
            NO column (list-shaped results only).
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(result.headers)
    for record in result.records():
        row = record.as_row(result.headers, positional=positional)
        writer.writerow([row[h] for h in result.headers])
    return buffer.getvalue()
