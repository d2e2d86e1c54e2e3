from __future__ import annotations

import os
from dataclasses import dataclass

from ocr.tuning import DEFAULT_TUNING, Tuning


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Database (roster store). Empty -> in-memory store.
    database_url: str

    # OCR
    ocr_engine: str  # tesseract
    ocr: Tuning
    default_slots: int

    # General
    environment: str
    log_level: str
    cors_allow_origins: str

    @staticmethod
    def from_env() -> "Settings":
        d = DEFAULT_TUNING
        ocr = Tuning(
            scale=_get_float("OCR_SCALE", d.scale),
            languages=(os.getenv("OCR_LANGUAGES") or d.languages).strip() or d.languages,
            timeout_s=_get_float("OCR_TIMEOUT_S", d.timeout_s),
            line_y_threshold=_get_int("OCR_LINE_Y_THRESHOLD", d.line_y_threshold),
            word_min_conf=_get_float("OCR_WORD_MIN_CONF", d.word_min_conf),
            line_min_conf=_get_float("OCR_LINE_MIN_CONF", d.line_min_conf),
        )

        return Settings(
            database_url=(os.getenv("DATABASE_URL") or "").strip(),
            ocr_engine=(os.getenv("OCR_ENGINE") or "tesseract").strip().lower(),
            ocr=ocr,
            default_slots=max(1, _get_int("DEFAULT_SLOTS", 7)),
            environment=(os.getenv("ENVIRONMENT") or os.getenv("ENV") or "stage").strip() or "stage",
            log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper() or "INFO",
            cors_allow_origins=(os.getenv("CORS_ALLOW_ORIGINS") or "*").strip() or "*",
        )
