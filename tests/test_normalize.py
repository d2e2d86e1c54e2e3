from ocr.repair import casefold_key, normalize_text


def test_quotes_are_straightened():
    assert normalize_text("“Anna” ‘Lee’") == "\"Anna\" 'Lee'"


def test_whitespace_runs_and_newlines_collapse():
    assert normalize_text("  Anna \t\n  Lee \r\n") == "Anna Lee"


def test_none_and_empty_give_empty_string():
    assert normalize_text(None) == ""
    assert normalize_text("") == ""
    assert normalize_text(" \n\t ") == ""


def test_normalization_is_idempotent():
    samples = [
        "  T.  Natthanan ",
        "สมชาย  ใจดี",
        "“O’Neil”\n\nSmith",
        "\x1c a \x1c b \x1c",
        "STAFF",
        "",
    ]
    for s in samples:
        once = normalize_text(s)
        assert normalize_text(once) == once


def test_casefold_key_ignores_case_and_spacing():
    assert casefold_key(" ANNA  lee") == casefold_key("anna Lee")
