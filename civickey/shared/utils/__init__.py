"""Shared utilities."""

from civickey.shared.utils.datetime import ensure_utc, local_today, utc_now
from civickey.shared.utils.i18n import localize
from civickey.shared.utils.text import normalize_text

__all__ = ["ensure_utc", "local_today", "localize", "normalize_text", "utc_now"]
