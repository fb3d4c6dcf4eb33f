"""Municipality (tenant) domain entity.

Represents one municipality's configuration, independent of persistence.
Municipalities are never hard-deleted; they are deactivated.
"""

from dataclasses import dataclass, field
from typing import Any

from civickey.core.constants import DEFAULT_COLORS, DEFAULT_PROVINCE
from civickey.domain.exceptions import ValidationException
from civickey.domain.value_objects.core import LocalizedText, MunicipalityId


@dataclass
class MunicipalityEntity:
    """Domain entity for a municipality.

    name may be stored as a plain string or {en, fr}; name_en/name_fr are
    always resolved so listings can sort and display without re-parsing.
    """

    id: str
    name: LocalizedText
    province: str = DEFAULT_PROVINCE
    colors: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    contact: dict[str, Any] = field(default_factory=dict)
    logo: str | None = None
    active: bool = True
    website: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate business rules. Raises ValidationException if invalid."""
        try:
            MunicipalityId(self.id)
        except ValueError as e:
            raise ValidationException(str(e), field="id") from e
        if not (self.name.en or self.name.fr):
            raise ValidationException("Municipality name is required", field="name")

    @property
    def custom_domain(self) -> str | None:
        return (self.website or {}).get("customDomain") or None

    def display_name(self, locale: str) -> str:
        return self.name.get(locale)

    def deactivate(self) -> None:
        """Set active=False. Idempotent."""
        self.active = False

    def activate(self) -> None:
        """Set active=True. Idempotent."""
        self.active = True

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "MunicipalityEntity":
        raw_name = data.get("name")
        name = LocalizedText.from_value(raw_name)
        name = LocalizedText(
            en=data.get("nameEn") or name.en,
            fr=data.get("nameFr") or name.fr,
        )
        return cls(
            id=doc_id,
            name=name,
            province=data.get("province") or DEFAULT_PROVINCE,
            colors=data.get("colors") or dict(DEFAULT_COLORS),
            contact=data.get("contact") or {},
            logo=data.get("logo"),
            active=data.get("active", True) is not False,
            website=data.get("website") or {},
        )

    def to_document(self) -> dict[str, Any]:
        """Fields written when the municipality is created."""
        return {
            "name": self.name.en or self.name.fr,
            "nameEn": self.name.en or self.name.fr,
            "nameFr": self.name.fr or self.name.en,
            "province": self.province,
            "colors": self.colors,
            "contact": self.contact or {"phone": "", "email": "", "website": ""},
            "logo": self.logo,
            "active": self.active,
        }

    def summary(self) -> dict[str, Any]:
        """Listing shape used by the selection screen and the super-admin switcher."""
        return {
            "id": self.id,
            "nameEn": self.name.en or self.name.fr,
            "nameFr": self.name.fr or self.name.en,
            "province": self.province,
            "logo": self.logo,
            "colors": self.colors,
            "active": self.active,
        }
