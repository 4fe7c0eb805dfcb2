"""
PaddleOCR reader for rendered document pages.

Pages arrive as BGR arrays from `text_layer.render_page`. The engine returns
their text as glyph fragments in page units, so OCR pages and text-layer pages
go through the same line reconstruction.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, List, Optional

_PADDLE_FLAGS = (
    "FLAGS_use_mkldnn",
    "FLAGS_enable_onednn",
    "FLAGS_enable_new_ir",
    "FLAGS_enable_new_executor",
    "FLAGS_enable_pir_api",
    "FLAGS_enable_pir_in_executor",
)

# Paddle reads these when it is first imported
os.environ.setdefault("PADDLE_DISABLE_ONEDNN", "1")
for _flag in _PADDLE_FLAGS:
    os.environ.setdefault(_flag, "0")

import cv2
import numpy as np
from paddleocr import PaddleOCR

from .layout import OcrResult, ocr_items_to_fragments
from .records import GlyphFragment

logger = logging.getLogger(__name__)

MARGIN_COLOR = (255, 255, 255)


class OCREngineError(RuntimeError):
    """Raised when the OCR model cannot be loaded or a page cannot be read."""


def _disable_paddle_flags(paddle_module: Any) -> None:
    for name in _PADDLE_FLAGS:
        try:
            paddle_module.set_flags({name: False})
        except (ValueError, RuntimeError) as exc:
            # Flag names differ between paddle releases
            logger.debug("Paddle flag %s not set: %s", name, exc)


class OCREngine:
    """
    Recognizes the text lines of page images with PaddleOCR on the CPU.

    The model is loaded on first use. Each page is framed with a white margin
    before recognition, as text touching the image edge is often missed; boxes
    are shifted back into the page's own pixel space afterwards.

    Args:
        lang: PaddleOCR language code.
        use_angle_cls: Classify text-line orientation.
        logger: Object with `info` and `warning` methods.
        margin: Margin width in pixels.
    """

    def __init__(
        self,
        lang: str = "en",
        use_angle_cls: bool = True,
        logger: Optional[Any] = None,
        margin: int = 20,
    ) -> None:
        self.lang = lang
        self.use_angle_cls = use_angle_cls
        self.margin = max(margin, 0)
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._model: Optional[PaddleOCR] = None
        self.load_seconds: Optional[float] = None

    @property
    def loaded(self) -> bool:
        return self._model is not None

    def initialize(self) -> float:
        """Loads the model if needed and returns how long loading took."""
        if self._model is not None:
            return self.load_seconds

        start = time.perf_counter()
        try:
            import paddle

            _disable_paddle_flags(paddle)
            paddle.set_device("cpu")
            model = PaddleOCR(use_textline_orientation=self.use_angle_cls, lang=self.lang)
        except Exception as exc:
            raise OCREngineError(f"Failed to load PaddleOCR model '{self.lang}': {exc}") from exc

        self._model = model
        self.load_seconds = time.perf_counter() - start
        self._logger.info(f"OCR model '{self.lang}' loaded in {self.load_seconds:.3f}s")
        return self.load_seconds

    def recognize(self, image: np.ndarray) -> OcrResult:
        """
        Recognizes one page image.

        Returns:
            [(bbox, (text, score)), ...] with bbox corners in the pixel space of
            `image`.

        Raises:
            OCREngineError: if the model fails to load or to run, or `image` is
                not a page image array.
        """
        framed = self._frame(image)
        self.initialize()

        start = time.perf_counter()
        try:
            raw = self._model.predict(framed)
        except Exception as exc:
            raise OCREngineError(f"OCR recognition failed: {exc}") from exc

        items = self._unpack(raw)
        self._logger.info(f"Recognized {len(items)} text lines in {time.perf_counter() - start:.3f}s")
        if not items:
            self._logger.warning("No text recognized on page")
        return items

    def read_page(self, image: np.ndarray, scale: float = 1.0, row_height_ratio: float = 0.5) -> List[GlyphFragment]:
        """
        Recognizes a rendered page and returns its text as glyph fragments.

        Args:
            image: Page image rendered at `scale` pixels per page unit.
            scale: Render scale of `image`.
            row_height_ratio: Row clustering tolerance, relative to the average
                text line height.
        """
        items = self.recognize(image)
        return ocr_items_to_fragments(items, image.shape[0], scale, row_height_ratio)

    def _frame(self, image: Any) -> np.ndarray:
        """Returns `image` as 3-channel BGR inside the white margin."""
        if not isinstance(image, np.ndarray) or image.ndim not in (2, 3):
            raise OCREngineError(f"Expected a page image array, got {type(image).__name__}")
        if image.ndim == 2 or image.shape[2] == 1:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
        if not self.margin:
            return image
        m = self.margin
        return cv2.copyMakeBorder(image, m, m, m, m, cv2.BORDER_CONSTANT, value=MARGIN_COLOR)

    def _unpack(self, raw: Any) -> OcrResult:
        """Converts the first `predict` result dict into (bbox, (text, score)) items."""
        if not isinstance(raw, list) or not raw or not isinstance(raw[0], dict):
            return []

        page = raw[0]
        polys, texts, scores = page.get("rec_polys"), page.get("rec_texts"), page.get("rec_scores")
        if polys is None or texts is None or scores is None:
            return []
        if not len(polys) == len(texts) == len(scores):
            self._logger.warning(
                f"OCR returned {len(polys)} boxes, {len(texts)} texts and {len(scores)} scores; page skipped"
            )
            return []

        m = self.margin
        return [
            ([[float(x) - m, float(y) - m] for x, y in poly], (str(text), float(score)))
            for poly, text, score in zip(polys, texts, scores)
        ]
