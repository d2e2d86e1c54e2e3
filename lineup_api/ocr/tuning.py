from __future__ import annotations

from dataclasses import dataclass

# Empirical constants, tuned against roster screenshots (gradient backgrounds,
# stylized fonts, Thai + English). Override through Tuning / config.Settings.
UPSCALE = 2.0
LANGUAGES = "tha+eng"

LINE_Y_THRESHOLD_PX = 18
WORD_MIN_CONF = 30.0
WORD_MIN_LEN = 2

LINE_MIN_CONF = 25.0
NAME_MIN_LEN = 2
NAME_MAX_LEN = 30

BANNER_WIDTH_FRAC = 0.90
BANNER_HEIGHT_FRAC = 0.12
HEADER_BAND_FRAC = 0.08


@dataclass(frozen=True)
class Tuning:
    scale: float = UPSCALE
    languages: str = LANGUAGES
    timeout_s: float = 0.0

    line_y_threshold: int = LINE_Y_THRESHOLD_PX
    word_min_conf: float = WORD_MIN_CONF
    word_min_len: int = WORD_MIN_LEN

    line_min_conf: float = LINE_MIN_CONF
    name_min_len: int = NAME_MIN_LEN
    name_max_len: int = NAME_MAX_LEN

    banner_width_frac: float = BANNER_WIDTH_FRAC
    banner_height_frac: float = BANNER_HEIGHT_FRAC
    header_band_frac: float = HEADER_BAND_FRAC


DEFAULT_TUNING = Tuning()
