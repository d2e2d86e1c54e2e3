from typing import Optional

_QUOTES = str.maketrans({
    "“": '"',  # left double
    "”": '"',  # right double
    "‘": "'",  # left single
    "’": "'",  # right single
})


def normalize_text(s: Optional[str]) -> str:
    """Unify curly quotes, collapse every whitespace run (newlines included), trim.

    Total and idempotent; None or "" gives "".
    """
    if not s:
        return ""
    # str.split() with no separator collapses runs and drops the ends in one go
    return " ".join(str(s).translate(_QUOTES).split())


def casefold_key(s: Optional[str]) -> str:
    """Key used for every case-insensitive comparison in the pipeline."""
    return normalize_text(s).casefold()
