"""Waste item search-term derivation."""

from civickey.shared.utils.text import normalize_text


def build_search_terms(
    name_fr: str | None, name_en: str | None, aliases: str | None = None
) -> list[str]:
    """Normalized search terms for a waste item.

    Each full normalized name, each whitespace-separated word of it, then
    each comma-separated alias; de-duplicated in first-seen order.
    """
    terms: list[str] = []
    seen: set[str] = set()

    def add(term: str) -> None:
        if term and term not in seen:
            seen.add(term)
            terms.append(term)

    for name in (name_fr, name_en):
        normalized = normalize_text(name or "")
        add(normalized)
        for word in normalized.split():
            add(word)
    for alias in (aliases or "").split(","):
        add(normalize_text(alias))
    return terms
