# -*- coding: utf-8 -*-
"""
End-to-end extraction of a parts list from a PDF.

Pages are read one at a time. A document without any text layer is rendered
page by page and passed through OCR instead. Cancellation is checked only
between pages.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, Union

from .assemble import parse_document_text
from .layout import page_has_text, reconstruct_document
from .records import ExtractionCancelled, GlyphFragment, NoTableFoundError, ParseResult, RowShape
from .settings import ExtractionSettings
from . import text_layer

DocumentSource = Union[str, Path, bytes]


class DocumentExtractor:
    """
    Extracts reconstructed text and parts rows from PDF documents.

    Args:
        ocr: Any object with `read_page(image, scale, row_height_ratio)` returning the
            page text as glyph fragments, like `OCREngine`.
            When omitted, an `OCREngine` is created on first use.
        settings: Heuristic constants.
        should_cancel: Polled before each page; returning True aborts with
            ExtractionCancelled.
        logger: Object with `info` and `warning` methods.
    """

    def __init__(
        self,
        ocr: Optional[Any] = None,
        settings: Optional[ExtractionSettings] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self.settings = settings or ExtractionSettings()
        self._ocr = ocr
        self._should_cancel = should_cancel
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def extract_text(self, source: DocumentSource) -> Tuple[str, bool]:
        """
        Returns (text, used_ocr) for a document.

        Raises:
            DocumentError: if the PDF cannot be opened.
            ExtractionCancelled: if cancelled between pages.
            OCREngineError: if the OCR fallback fails.
        """
        settings = self.settings
        with text_layer.open_document(source) as doc:
            pages: List[List[GlyphFragment]] = []
            for page_no, fragments in enumerate(text_layer.iter_glyph_pages(doc), start=1):
                self._check_cancelled(page_no)
                pages.append(fragments)

            if any(page_has_text(p) for p in pages):
                text = reconstruct_document(pages, settings.join_gap, settings.column_gap)
                self._logger.info(f"Extracted {len(text)} characters from {len(pages)} pages")
                return text, False

            self._logger.warning("No text items found; the PDF looks image-based, running OCR")
            ocr = self._get_ocr()
            ocr_pages: List[List[GlyphFragment]] = []
            for page_no, page in enumerate(doc, start=1):
                self._check_cancelled(page_no)
                self._logger.info(f"Processing page {page_no} of {len(doc)}...")
                image = text_layer.render_page(page, settings.render_scale)
                ocr_pages.append(ocr.read_page(image, settings.render_scale, settings.ocr_row_height_ratio))

        text = reconstruct_document(ocr_pages, settings.join_gap, settings.column_gap)
        self._logger.info(f"OCR completed, extracted {len(text)} characters")
        return text, True

    def extract_parts(self, source: DocumentSource, shape: RowShape = RowShape.LIST) -> ParseResult:
        """
        Extracts the parts table of a document.

        Raises:
            NoTableFoundError: if the document yields no rows at all.
        """
        text, used_ocr = self.extract_text(source)
        result = parse_document_text(text, shape, self.settings)
        if result.is_empty:
            raise NoTableFoundError(
                "No table data found in PDF. Please ensure the PDF contains a properly "
                "formatted parts table."
            )
        self._logger.info(f"Parsed {len(result)} rows{' (OCR)' if used_ocr else ''}")
        return result

    def _check_cancelled(self, page_no: int) -> None:
        if self._should_cancel is not None and self._should_cancel():
            raise ExtractionCancelled(f"Extraction cancelled before page {page_no}")

    def _get_ocr(self) -> Any:
        if self._ocr is None:
            from .ocr_engine import OCREngine

            self._ocr = OCREngine(lang=self.settings.ocr_lang, logger=self._logger)
        return self._ocr


def extract_document_text(source: DocumentSource, **kwargs: Any) -> Tuple[str, bool]:
    """Shortcut for `DocumentExtractor(**kwargs).extract_text(source)`."""
    return DocumentExtractor(**kwargs).extract_text(source)


def extract_parts(source: DocumentSource, shape: RowShape = RowShape.LIST, **kwargs: Any) -> ParseResult:
    """Shortcut for `DocumentExtractor(**kwargs).extract_parts(source, shape)`."""
    return DocumentExtractor(**kwargs).extract_parts(source, shape)
