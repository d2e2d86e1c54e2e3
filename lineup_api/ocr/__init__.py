from .errors import ExtractionError, NoNamesFoundError, OcrEngineError, PreprocessError
from .router import extract_names
from .tuning import DEFAULT_TUNING, Tuning

__all__ = [
    "ExtractionError",
    "NoNamesFoundError",
    "OcrEngineError",
    "PreprocessError",
    "extract_names",
    "DEFAULT_TUNING",
    "Tuning",
]
