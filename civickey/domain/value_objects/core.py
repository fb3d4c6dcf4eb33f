"""Domain value objects for the CivicKey application.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from typing import Any

from civickey.core.constants import RESERVED_PAGE_SLUGS

# Shared slug pattern: lowercase alphanumeric with optional hyphens (e.g. saint-lazare).
_SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_SLUG_UNSAFE_RE = re.compile(r"[^a-z0-9-]")


@dataclass(frozen=True)
class MunicipalityId:
    """Value object for a municipality (tenant) ID.

    IDs are 2-64 characters, lowercase alphanumeric with optional hyphens.
    Stable for the life of the municipality; used as the tenant key and as
    the website subdomain.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Municipality ID must be a non-empty string")
        if len(self.value) < 2 or len(self.value) > 64:
            raise ValueError("Municipality ID must be 2-64 characters")
        if not _SLUG_RE.match(self.value):
            raise ValueError(
                "Municipality ID must be lowercase alphanumeric with optional "
                "hyphens (e.g., 'saint-lazare')"
            )


@dataclass(frozen=True)
class PageSlug:
    """Value object for a custom page slug.

    Use PageSlug.normalize() for raw user input: lowercases and replaces
    any character outside [a-z0-9-] with '-'. Reserved slugs belong to
    built-in website sections and are rejected.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("URL slug is required")
        if _SLUG_UNSAFE_RE.search(self.value):
            raise ValueError("URL slug may only contain a-z, 0-9 and '-'")
        if self.value in RESERVED_PAGE_SLUGS:
            raise ValueError(f"URL slug '{self.value}' is reserved")

    @classmethod
    def normalize(cls, raw: str) -> "PageSlug":
        return cls(_SLUG_UNSAFE_RE.sub("-", (raw or "").strip().lower()))


@dataclass(frozen=True)
class LocalizedText:
    """Bilingual text ({en, fr}) with the platform's fallback order."""

    en: str = ""
    fr: str = ""

    @classmethod
    def from_value(cls, value: Any) -> "LocalizedText":
        """Build from a {en, fr} mapping or a plain string (used for both languages)."""
        if isinstance(value, LocalizedText):
            return value
        if isinstance(value, str):
            return cls(en=value, fr=value)
        if isinstance(value, dict):
            return cls(en=value.get("en") or "", fr=value.get("fr") or "")
        return cls()

    def get(self, locale: str) -> str:
        """Return text for locale, falling back to en then fr."""
        if locale == "fr" and self.fr:
            return self.fr
        if locale == "en" and self.en:
            return self.en
        return self.en or self.fr

    def to_dict(self) -> dict[str, str]:
        return {"en": self.en, "fr": self.fr}
