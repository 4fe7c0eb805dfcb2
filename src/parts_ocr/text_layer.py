# -*- coding: utf-8 -*-
"""
Reads glyph fragments and page images from PDF documents with PyMuPDF.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Union

import fitz  # PyMuPDF
import numpy as np

from .records import DocumentError, GlyphFragment

logger = logging.getLogger(__name__)


def open_document(source: Union[str, Path, bytes]) -> fitz.Document:
    """
    Opens a PDF from a path or from raw bytes.

    Raises:
        DocumentError: if PyMuPDF cannot open the document.
    """
    is_stream = isinstance(source, (bytes, bytearray))
    try:
        if is_stream:
            return fitz.open(stream=bytes(source), filetype="pdf")
        return fitz.open(str(source))
    except Exception as exc:
        label = "<bytes>" if is_stream else source
        raise DocumentError(f"Failed to open PDF {label}: {exc}") from exc


def page_glyphs(page: fitz.Page) -> List[GlyphFragment]:
    """
    Returns the text spans of a page as glyph fragments.

    Each span is anchored at its baseline origin. PyMuPDF measures `y` downwards
    from the top of the page, so it is flipped against the page height.
    """
    height = page.rect.height
    fragments: List[GlyphFragment] = []
    data = page.get_text("dict")
    for block in data.get("blocks", []):
        if block.get("type") != 0:  # image blocks carry no text
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                text = span.get("text", "")
                if not text:
                    continue
                x, y = span["origin"]
                fragments.append(GlyphFragment(x=float(x), y=float(height - y), text=text))
    return fragments


def iter_glyph_pages(doc: fitz.Document) -> Iterator[List[GlyphFragment]]:
    """Yields the glyph fragments of each page in page order."""
    for page_no, page in enumerate(doc, start=1):
        fragments = page_glyphs(page)
        logger.debug("Page %d - %d text items", page_no, len(fragments))
        yield fragments


def render_page(page: fitz.Page, scale: float = 2.0) -> np.ndarray:
    """Renders a page into a BGR image array, `scale` pixels per point."""
    pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
    img = np.frombuffer(pix.samples, dtype=np.uint8).reshape(pix.height, pix.width, pix.n)
    if pix.n >= 3:
        img = img[:, :, 2::-1]  # RGB -> BGR
    else:
        img = np.repeat(img, 3, axis=2)
    return np.ascontiguousarray(img)
