"""Domain entities."""

from civickey.domain.entities.admin import AdminAccount, AdminSession
from civickey.domain.entities.municipality import MunicipalityEntity
from civickey.domain.entities.page import PageEntity
from civickey.domain.entities.schedule import ScheduleEntity

__all__ = [
    "AdminAccount",
    "AdminSession",
    "MunicipalityEntity",
    "PageEntity",
    "ScheduleEntity",
]
