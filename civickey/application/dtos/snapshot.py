"""DTOs for the aggregate tenant fetch."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Sections of the aggregate fetch, in response order.
SNAPSHOT_SECTIONS = ("config", "zones", "schedule", "events", "alerts", "facilities")


@dataclass(frozen=True)
class MunicipalitySnapshot:
    """Result of fetch_all: every section plus a per-section error marker.

    A failed section is None (config/schedule) or [] (lists) and its name
    is present in errors; the caller decides whether partial data is usable.
    """

    municipality_id: str
    fetched_at: datetime
    config: dict[str, Any] | None = None
    zones: list[dict[str, Any]] = field(default_factory=list)
    schedule: dict[str, Any] | None = None
    events: list[dict[str, Any]] = field(default_factory=list)
    alerts: list[dict[str, Any]] = field(default_factory=list)
    facilities: list[dict[str, Any]] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "municipalityId": self.municipality_id,
            "config": self.config,
            "zones": self.zones,
            "schedule": self.schedule,
            "events": self.events,
            "alerts": self.alerts,
            "facilities": self.facilities,
            "fetchedAt": self.fetched_at.isoformat(),
            "errors": dict(self.errors),
        }
