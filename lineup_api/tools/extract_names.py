#!/usr/bin/env python3
"""Run the roster-name OCR pipeline on a screenshot file.

Handy for tuning the line/confidence thresholds against new tournament
graphics without going through the web UI.

Examples:
  python lineup_api/tools/extract_names.py roster.png
  python lineup_api/tools/extract_names.py roster.png --slots 12 --json
  OCR_LINE_Y_THRESHOLD=24 python lineup_api/tools/extract_names.py roster.png -v

Exit codes: 0 names found, 1 no names detected, 2 unreadable input / OCR failure.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

# Allow running as a plain script from the repo root.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from config import Settings  # noqa: E402
from ocr import NoNamesFoundError, OcrEngineError, PreprocessError, extract_names  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Extract player names from a roster screenshot")
    p.add_argument("image", help="Path to the roster screenshot (png, jpeg, webp)")
    p.add_argument("--slots", type=int, default=0, help="Number of roster slots to fill (default: DEFAULT_SLOTS)")
    p.add_argument("--scale", type=float, default=0.0, help="Upscale factor before OCR (default: OCR_SCALE)")
    p.add_argument("--lang", default="", help="Tesseract language set (default: OCR_LANGUAGES)")
    p.add_argument("--json", action="store_true", help="Print a JSON array instead of one name per line")
    p.add_argument("-v", "--verbose", action="store_true", help="Log per-pass statistics")

    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)-8s | %(name)s | %(message)s",
    )

    settings = Settings.from_env()
    tuning = settings.ocr
    if args.scale > 0:
        tuning = replace(tuning, scale=args.scale)
    if args.lang.strip():
        tuning = replace(tuning, languages=args.lang.strip())
    slots = args.slots if args.slots > 0 else settings.default_slots

    try:
        data = Path(args.image).read_bytes()
    except OSError as e:
        print(f"Cannot read {args.image}: {e}", file=sys.stderr)
        return 2

    def _progress(pct: int) -> None:
        if args.verbose:
            print(f"\rOCR {pct:3d}%", end="\n" if pct >= 100 else "", file=sys.stderr)

    try:
        names = extract_names(data, slots, tuning=tuning, engine_hint=settings.ocr_engine, progress=_progress)
    except NoNamesFoundError:
        print("Could not detect names. Try a higher-res, less compressed screenshot.", file=sys.stderr)
        return 1
    except (PreprocessError, OcrEngineError) as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(names, ensure_ascii=False))
    else:
        for n in names:
            print(n)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
