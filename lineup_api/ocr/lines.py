from __future__ import annotations

from functools import reduce
from typing import Iterable, List, Tuple

import regex as re

from .repair.normalize import normalize_text
from .schema import BBox, Line, RawWord
from .tuning import LINE_Y_THRESHOLD_PX, WORD_MIN_CONF, WORD_MIN_LEN

_RX_DIGITS_ONLY = re.compile(r"^\d+$")

Group = Tuple[RawWord, ...]


def _keep_word(w: RawWord, *, min_conf: float, min_len: int) -> bool:
    if not w.text:
        return False
    if _RX_DIGITS_ONLY.match(w.text):
        # jersey numbers
        return False
    if len(w.text) < min_len:
        return False
    return w.conf >= min_conf


def clean_words(
    words: Iterable[RawWord],
    *,
    min_conf: float = WORD_MIN_CONF,
    min_len: int = WORD_MIN_LEN,
) -> List[RawWord]:
    """Normalize word text, drop noise tokens, return in reading order."""
    normalized = (RawWord(text=normalize_text(w.text), conf=w.conf, bbox=w.bbox) for w in words)
    kept = [w for w in normalized if _keep_word(w, min_conf=min_conf, min_len=min_len)]
    return sorted(kept, key=lambda w: (w.bbox.y0, w.bbox.x0))


def _cluster(groups: Tuple[Group, ...], word: RawWord, y_threshold: int) -> Tuple[Group, ...]:
    # A group's reference y is the y0 of the word that opened it.
    if groups and abs(word.bbox.y0 - groups[-1][0].bbox.y0) <= y_threshold:
        return groups[:-1] + (groups[-1] + (word,),)
    return groups + ((word,),)


def _to_line(group: Group) -> Line:
    return Line(
        text=" ".join(w.text for w in group).strip(),
        conf=sum(w.conf for w in group) / len(group),
        bbox=BBox.covering(w.bbox for w in group),
    )


def reconstruct_lines(
    words: Iterable[RawWord],
    *,
    y_threshold: int = LINE_Y_THRESHOLD_PX,
    min_conf: float = WORD_MIN_CONF,
    min_len: int = WORD_MIN_LEN,
) -> List[Line]:
    """
    Group OCR words into text lines by vertical proximity.

    Tesseract's own line segmentation falls apart on roster graphics
    (photos, gradients, names scattered under cards), so we rebuild lines
    greedily: walk words top->bottom/left->right, and start a new line when a
    word's top drifts more than y_threshold px from the top of the word that
    opened the current line. Output is in top->bottom order.
    """
    ordered = clean_words(words, min_conf=min_conf, min_len=min_len)
    groups: Tuple[Group, ...] = reduce(lambda acc, w: _cluster(acc, w, y_threshold), ordered, ())
    return [_to_line(g) for g in groups]
