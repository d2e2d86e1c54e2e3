from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import regex as re

from .repair.normalize import casefold_key, normalize_text
from .schema import Line
from .tuning import DEFAULT_TUNING, Tuning

# ---------- noise table (per-deployment tuning lives here) ----------
# Tournament branding, sponsors, age-group / tier labels.
NOISE_SUBSTRINGS: Tuple[str, ...] = (
    "mplus",
    "volleyball",
    "championship",
    "engineer",
    "u25",
    "u21",
    "cmu",
)
NOISE_EXACT: Tuple[str, ...] = ("staff",)

# Markers that sneak into otherwise valid name lines ("Anna STAFF").
STRIP_TOKENS: Tuple[str, ...] = ("staff", "u25", "u21", "cmu")
_RX_STRIP = re.compile(r"\b(?:" + "|".join(re.escape(t) for t in STRIP_TOKENS) + r")\b", re.I)

# ---------- name shapes ----------
_RX_ALLOWED = re.compile(r"^[0-9\s.'\-\p{Thai}A-Za-z]+$")
_RX_DIGITS_ONLY = re.compile(r"^\d+$")
_RX_THAI = re.compile(r"\p{Thai}")


@dataclass(frozen=True)
class NameShape:
    name: str
    pattern: re.Pattern
    min_len: int = 0
    max_len: int = 10**6

    def matches(self, t: str) -> bool:
        return self.min_len <= len(t) <= self.max_len and self.pattern.search(t) is not None


NAME_SHAPES: Tuple[NameShape, ...] = (
    # สมชาย ใจดี
    NameShape("thai", _RX_THAI, min_len=2, max_len=30),
    # POPOR, Newyear
    NameShape("latin_single", re.compile(r"^[A-Za-z]{2,20}$")),
    # T. Natthanan, K. Van Der Berg
    NameShape("initial_surname", re.compile(r"^[A-Z]\.\s*[A-Z][A-Za-z]+(?:\s+[A-Z][A-Za-z]+){0,2}$")),
    # Anna Lee
    NameShape("latin_words", re.compile(r"^[A-Za-z]{2,}(?:\s+[A-Za-z]{2,}){1,3}$")),
)


def is_noise(s: str) -> bool:
    low = casefold_key(s)
    if low in NOISE_EXACT:
        return True
    return any(n in low for n in NOISE_SUBSTRINGS)


def matching_shape(s: str) -> Optional[str]:
    t = normalize_text(s)
    for shape in NAME_SHAPES:
        if shape.matches(t):
            return shape.name
    return None


def looks_like_name(s: str) -> bool:
    """Thai / English / mixed personal-name heuristic."""
    t = normalize_text(s)
    if not t:
        return False
    if is_noise(t):
        return False
    if not _RX_ALLOWED.match(t):
        return False
    if _RX_DIGITS_ONLY.match(t):
        return False
    return matching_shape(t) is not None


def strip_markers(s: str) -> str:
    return normalize_text(_RX_STRIP.sub("", s))


def _spatially_plausible(ln: Line, image_width: int, image_height: int, tuning: Tuning) -> bool:
    # huge banner lines (sponsor strips, titles)
    if ln.bbox.width >= image_width * tuning.banner_width_frac:
        return False
    if ln.bbox.height >= image_height * tuning.banner_height_frac:
        return False
    # tournament header band
    return ln.bbox.y0 > image_height * tuning.header_band_frac


def name_candidates(
    lines: Iterable[Line],
    image_width: int,
    image_height: int,
    *,
    tuning: Tuning = DEFAULT_TUNING,
) -> List[Line]:
    """Stages 1-5: lines that plausibly hold one personal name, in reading order."""
    normed = [Line(text=normalize_text(ln.text), conf=ln.conf, bbox=ln.bbox) for ln in lines]
    out = [
        ln
        for ln in normed
        if tuning.name_min_len <= len(ln.text) <= tuning.name_max_len
        and ln.conf >= tuning.line_min_conf
        and _spatially_plausible(ln, image_width, image_height, tuning)
        and looks_like_name(ln.text)
    ]
    out.sort(key=lambda ln: ln.reading_key)
    return out


def filter_names(
    lines: Iterable[Line],
    image_width: int,
    image_height: int,
    max_count: int,
    *,
    tuning: Tuning = DEFAULT_TUNING,
) -> List[str]:
    """
    Reduce reconstructed lines to at most max_count unique names,
    top->bottom / left->right. Earlier lines win dedupe; once the cap is hit
    later lines are never looked at.
    """
    names: List[str] = []
    if max_count <= 0:
        return names

    seen = set()
    for c in name_candidates(lines, image_width, image_height, tuning=tuning):
        cleaned = strip_markers(c.text)
        if not cleaned or is_noise(cleaned):
            continue
        if len(cleaned) > tuning.name_max_len:
            continue

        key = casefold_key(cleaned)
        if key in seen:
            continue
        seen.add(key)
        names.append(cleaned)
        if len(names) >= max_count:
            break
    return names
