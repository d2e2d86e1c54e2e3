from config import Settings
from ocr import DEFAULT_TUNING

_VARS = (
    "OCR_SCALE",
    "OCR_LANGUAGES",
    "OCR_TIMEOUT_S",
    "OCR_LINE_Y_THRESHOLD",
    "OCR_WORD_MIN_CONF",
    "OCR_LINE_MIN_CONF",
    "DATABASE_URL",
    "OCR_ENGINE",
    "DEFAULT_SLOTS",
    "ENVIRONMENT",
    "ENV",
    "LOG_LEVEL",
    "CORS_ALLOW_ORIGINS",
)


def _clear(monkeypatch):
    for v in _VARS:
        monkeypatch.delenv(v, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)
    s = Settings.from_env()
    assert s.ocr == DEFAULT_TUNING
    assert s.database_url == ""
    assert s.ocr_engine == "tesseract"
    assert s.default_slots == 7
    assert s.environment == "stage"
    assert s.log_level == "INFO"
    assert s.cors_allow_origins == "*"


def test_overrides(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("OCR_SCALE", "3")
    monkeypatch.setenv("OCR_LANGUAGES", " eng ")
    monkeypatch.setenv("OCR_LINE_Y_THRESHOLD", "24")
    monkeypatch.setenv("OCR_WORD_MIN_CONF", "40")
    monkeypatch.setenv("OCR_LINE_MIN_CONF", "35.5")
    monkeypatch.setenv("DEFAULT_SLOTS", "12")
    monkeypatch.setenv("OCR_ENGINE", "Tess")
    monkeypatch.setenv("ENV", "prod")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = Settings.from_env()
    assert s.ocr.scale == 3.0
    assert s.ocr.languages == "eng"
    assert s.ocr.line_y_threshold == 24
    assert s.ocr.word_min_conf == 40.0
    assert s.ocr.line_min_conf == 35.5
    assert s.default_slots == 12
    assert s.ocr_engine == "tess"
    assert s.environment == "prod"
    assert s.log_level == "DEBUG"


def test_garbage_values_fall_back(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("OCR_SCALE", "big")
    monkeypatch.setenv("OCR_LINE_Y_THRESHOLD", "1.5")
    monkeypatch.setenv("DEFAULT_SLOTS", "-3")
    monkeypatch.setenv("OCR_LANGUAGES", "   ")
    s = Settings.from_env()
    assert s.ocr.scale == DEFAULT_TUNING.scale
    assert s.ocr.line_y_threshold == DEFAULT_TUNING.line_y_threshold
    assert s.ocr.languages == DEFAULT_TUNING.languages
    assert s.default_slots == 1
