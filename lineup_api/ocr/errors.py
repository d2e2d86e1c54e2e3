"""
Failure taxonomy for the name-extraction pipeline.

PreprocessError and OcrEngineError are terminal for the whole extraction.
NoNamesFoundError is the expected "bad screenshot" outcome: both passes ran
cleanly but nothing name-shaped survived, and the caller should tell the user
to try a clearer image instead of blaming the OCR engine.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ExtractionError(Exception):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class PreprocessError(ExtractionError):
    """Source image could not be decoded or rasterized."""


class OcrEngineError(ExtractionError):
    """The recognition engine is missing, crashed or timed out."""


class NoNamesFoundError(ExtractionError):
    def __init__(self, message: str = "Could not detect names", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
