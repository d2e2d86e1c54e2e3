from typing import Optional
from .itxt import ITxtExtractor, PageSegMode, ProgressFn
from .tess import TesseractExtractor


def make_extractor(name: Optional[str], *, timeout_s: float = 0.0) -> ITxtExtractor:
    """
    Factory. Supported names:
      - 'tesseract' / 'tess' (default)
    """
    n = (name or "tesseract").strip().lower()
    if n not in ("tesseract", "tess", "auto"):
        raise ValueError(f"Unknown OCR engine: {name!r}")
    return TesseractExtractor(timeout_s=timeout_s)

__all__ = [
    "ITxtExtractor",
    "PageSegMode",
    "ProgressFn",
    "TesseractExtractor",
    "make_extractor",
]
