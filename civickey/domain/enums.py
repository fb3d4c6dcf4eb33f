"""Domain enumerations for the CivicKey application.

Enums represent fixed sets of domain values (roles, locales, page types).
"""

from enum import Enum


class Role(str, Enum):
    """Admin role. Declaration order is the hierarchy, lowest first."""

    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]

    @classmethod
    def parse(cls, value: "str | Role | None") -> "Role | None":
        """Return the Role for value, or None if value is not a known role."""
        if isinstance(value, Role):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def rank(self) -> int:
        """Position in the hierarchy (viewer=0 ... super-admin=3)."""
        return list(Role).index(self)


class Locale(str, Enum):
    """Supported response languages."""

    EN = "en"
    FR = "fr"


class Frequency(str, Enum):
    """Collection frequency for a zone/collection-type pair."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"


class PageType(str, Enum):
    """Custom page type; selects the content shape and renderer."""

    TEXT = "text"
    INFO_CARDS = "info-cards"
    PDF = "pdf"
    COUNCIL = "council"
    LINKS = "links"
    CONTACT = "contact"


class PageStatus(str, Enum):
    """Publication state of a custom page."""

    DRAFT = "draft"
    PUBLISHED = "published"


class SessionState(str, Enum):
    """Inactivity guard state."""

    ACTIVE = "active"
    EXPIRED = "expired"
