from .normalize import (
    normalize_text,
    casefold_key,
)

__all__ = [
    "normalize_text",
    "casefold_key",
]
