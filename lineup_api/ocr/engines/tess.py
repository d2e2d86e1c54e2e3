import logging
import math
import os
from typing import Any, Dict, List, Optional

import numpy as np

import pytesseract
from pytesseract import Output  # type: ignore

from ..errors import OcrEngineError
from ..schema import BBox, RawWord
from .itxt import ITxtExtractor, PageSegMode, ProgressFn

logger = logging.getLogger("lineup.ocr")

# Allow override (Windows desktop dev, slim containers with tesseract off PATH)
tpath = os.getenv("TESSERACT_PATH")
if tpath and os.path.exists(tpath):
    pytesseract.pytesseract.tesseract_cmd = tpath

# Tesseract TSV levels: 1=page, 2=block, 3=para, 4=line, 5=word
WORD_LEVEL = 5


def _cfg(mode: PageSegMode) -> str:
    # LSTM only; keep interword spaces so Thai tokens are not glued together.
    return f"--oem 1 --psm {int(mode)} -c preserve_interword_spaces=1"


def _safe_float(x) -> float:
    try:
        return float(x)
    except Exception:
        return float("nan")


def _safe_int(x) -> Optional[int]:
    f = _safe_float(x)
    if math.isnan(f) or math.isinf(f):
        return None
    return int(f)


def _coerce_conf(raw) -> float:
    c = _safe_float(raw)
    if math.isnan(c):
        return 0.0
    return max(0.0, min(100.0, c))


def _report(progress: Optional[ProgressFn], pct: int) -> None:
    if progress is None:
        return
    try:
        progress(pct)
    except Exception:
        # observer only; never allowed to break recognition
        logger.warning("progress callback failed at %d%%", pct, exc_info=True)


def words_from_data(data: Dict[str, List[Any]]) -> List[RawWord]:
    """
    Coerce pytesseract image_to_data(DICT) output into RawWord rows.
    Only word-level rows are kept; rows with a missing/garbled box are dropped.
    Text is passed through untouched (normalization happens downstream).
    """
    texts = data.get("text") or []
    n = len(texts)
    levels = data.get("level") or [WORD_LEVEL] * n
    out: List[RawWord] = []

    for i in range(n):
        if _safe_int(levels[i] if i < len(levels) else None) != WORD_LEVEL:
            continue
        try:
            left = _safe_int(data["left"][i])
            top = _safe_int(data["top"][i])
            width = _safe_int(data["width"][i])
            height = _safe_int(data["height"][i])
        except (KeyError, IndexError):
            continue
        if None in (left, top, width, height) or width < 0 or height < 0:
            continue

        confs = data.get("conf") or []
        conf = _coerce_conf(confs[i] if i < len(confs) else None)

        text = texts[i]
        out.append(
            RawWord(
                text="" if text is None else str(text),
                conf=conf,
                bbox=BBox(x0=left, y0=top, x1=left + width, y1=top + height),
            )
        )
    return out


class TesseractExtractor(ITxtExtractor):
    """
    Word-level recognition via pytesseract.

    Tesseract block/line numbering is ignored; lines are rebuilt from word
    boxes in ocr.lines. No retries here, the router owns the second pass.
    """

    def __init__(self, *, timeout_s: float = 0.0) -> None:
        self.timeout_s = float(timeout_s or 0.0)

    def recognize(
        self,
        gray_l8: np.ndarray,
        *,
        languages: str,
        mode: PageSegMode,
        progress: Optional[ProgressFn] = None,
    ) -> List[RawWord]:
        assert gray_l8.ndim == 2, "expect grayscale (H,W)"

        _report(progress, 0)
        try:
            data = pytesseract.image_to_data(
                gray_l8,
                lang=languages,
                config=_cfg(mode),
                output_type=Output.DICT,
                timeout=self.timeout_s,
            )
        except (pytesseract.TesseractError, RuntimeError, OSError) as e:
            # TesseractNotFoundError is an OSError, timeouts surface as RuntimeError
            logger.error("tesseract failed (psm=%d, lang=%s): %s", int(mode), languages, e)
            raise OcrEngineError(
                "OCR engine failed",
                details={"engine": "tesseract", "psm": int(mode), "languages": languages, "error": str(e)},
            ) from e

        words = words_from_data(data)
        _report(progress, 100)
        return words
