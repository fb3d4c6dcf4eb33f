"""Text normalization for case- and diacritic-insensitive matching."""

import unicodedata


def normalize_text(value: str | None) -> str:
    """Case-fold, strip diacritics and surrounding whitespace.

    'Papier Recyclé ' -> 'papier recycle'
    """
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold().strip()
