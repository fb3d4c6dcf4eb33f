"""Waste-item autocomplete: prefix matches first, then substring matches."""

from typing import Any

from civickey.shared.utils.text import normalize_text

MIN_QUERY_LENGTH = 2


def search_waste_items(query: str | None, items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Return items whose searchTerms match query, in two groups.

    An item is a prefix match if any term starts with the normalized query,
    otherwise a substring match if any term contains it. Each group keeps
    catalog order. Queries under MIN_QUERY_LENGTH characters return [].
    """
    normalized = normalize_text(query or "")
    if len(normalized) < MIN_QUERY_LENGTH:
        return []

    prefix_matches: list[dict[str, Any]] = []
    substring_matches: list[dict[str, Any]] = []
    for item in items:
        is_substring = False
        for term in item.get("searchTerms") or []:
            if term.startswith(normalized):
                prefix_matches.append(item)
                break
            if normalized in term:
                is_substring = True
        else:
            if is_substring:
                substring_matches.append(item)
    return prefix_matches + substring_matches
