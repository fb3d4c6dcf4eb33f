"""Domain value objects."""

from civickey.domain.value_objects.core import LocalizedText, MunicipalityId, PageSlug

__all__ = ["LocalizedText", "MunicipalityId", "PageSlug"]
