from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .engines import ITxtExtractor, PageSegMode, ProgressFn, make_extractor
from .errors import NoNamesFoundError
from .lines import reconstruct_lines
from .names import filter_names
from .preprocess import preprocess
from .tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger("lineup.ocr")

# Primary pass first; sparse text only if the primary finds nothing.
# Sparse mode tolerates names scattered under player cards but loses line coherence.
PASSES = (PageSegMode.AUTO, PageSegMode.SPARSE_TEXT)


def _run_pass(
    extractor: ITxtExtractor,
    gray: np.ndarray,
    mode: PageSegMode,
    max_count: int,
    tuning: Tuning,
    progress: Optional[ProgressFn],
) -> List[str]:
    h, w = gray.shape[:2]
    words = extractor.recognize(gray, languages=tuning.languages, mode=mode, progress=progress)
    lines = reconstruct_lines(
        words,
        y_threshold=tuning.line_y_threshold,
        min_conf=tuning.word_min_conf,
        min_len=tuning.word_min_len,
    )
    names = filter_names(lines, w, h, max_count, tuning=tuning)
    logger.info(
        "name pass psm=%d: %d words -> %d lines -> %d names",
        int(mode), len(words), len(lines), len(names),
    )
    return names


def extract_names(
    image_bytes: bytes,
    max_count: int = 7,
    *,
    tuning: Tuning = DEFAULT_TUNING,
    extractor: Optional[ITxtExtractor] = None,
    engine_hint: Optional[str] = None,
    progress: Optional[ProgressFn] = None,
) -> List[str]:
    """
    Roster screenshot -> up to max_count player names.

    Strategy:
      - preprocess once (upscale + grayscale + contrast/brightness)
      - pass 1: automatic page segmentation
      - pass 2 (only when pass 1 yields nothing): sparse-text segmentation
        over the very same buffer
    Raises NoNamesFoundError when both passes come back empty.
    PreprocessError / OcrEngineError propagate untouched.
    """
    if max_count < 1:
        raise ValueError("max_count must be >= 1")

    gray = preprocess(image_bytes, scale=tuning.scale)
    ext = extractor or make_extractor(engine_hint, timeout_s=tuning.timeout_s)

    for mode in PASSES:
        names = _run_pass(ext, gray, mode, max_count, tuning, progress)
        if names:
            return names

    h, w = gray.shape[:2]
    raise NoNamesFoundError(
        details={"width": w, "height": h, "passes": [m.name for m in PASSES]},
    )
