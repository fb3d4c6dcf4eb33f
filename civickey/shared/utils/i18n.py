"""Localized-field helpers for bilingual ({en, fr}) documents."""

from typing import Any


def localize(value: Any, locale: str, fallback: str = "") -> Any:
    """Return the locale's text from a {en, fr} mapping.

    Falls back to en, then fr, then fallback. Plain strings (and other
    non-mapping values such as lists) pass through unchanged.
    """
    if value is None:
        return fallback
    if isinstance(value, dict):
        for key in (locale, "en", "fr"):
            text = value.get(key)
            if text:
                return text
        return fallback
    return value


def localize_fields(
    document: dict[str, Any], locale: str, fields: tuple[str, ...]
) -> dict[str, Any]:
    """Return a copy of document with the named bilingual fields localized."""
    out = dict(document)
    for name in fields:
        if name in out:
            out[name] = localize(out[name], locale)
    return out
