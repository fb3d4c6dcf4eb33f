"""Collection schedule domain entity (one per municipality)."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from civickey.domain.enums import Frequency
from civickey.domain.exceptions import ValidationException


@dataclass
class ScheduleEntity:
    """Collection types, per-zone schedules, guidelines and special collections.

    schedules maps zone id -> collection type id -> {dayOfWeek, frequency}.
    dayOfWeek is 0=Sunday ... 6=Saturday.
    """

    collection_types: list[dict[str, Any]] = field(default_factory=list)
    schedules: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)
    guidelines: dict[str, Any] = field(default_factory=dict)
    special_collections: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_document(cls, data: dict[str, Any] | None) -> "ScheduleEntity":
        data = data or {}
        return cls(
            collection_types=list(data.get("collectionTypes") or []),
            schedules=dict(data.get("schedules") or {}),
            guidelines=dict(data.get("guidelines") or {}),
            special_collections=list(data.get("specialCollections") or []),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "collectionTypes": self.collection_types,
            "schedules": self.schedules,
            "guidelines": self.guidelines,
            "specialCollections": self.special_collections,
        }

    def collection_type_ids(self) -> set[str]:
        return {ct.get("id") for ct in self.collection_types if ct.get("id")}

    def collection_type(self, type_id: str) -> dict[str, Any] | None:
        for ct in self.collection_types:
            if ct.get("id") == type_id:
                return ct
        return None

    def zone_schedule(self, zone_id: str) -> dict[str, dict[str, Any]] | None:
        """Return the collection entries for exactly this zone, or None."""
        entry = self.schedules.get(zone_id)
        return dict(entry) if entry is not None else None

    def orphaned_zone_ids(self, zone_ids: set[str]) -> set[str]:
        """Zone keys in schedules that have no matching zone."""
        return set(self.schedules) - set(zone_ids)

    def without_zone(self, zone_id: str) -> "ScheduleEntity":
        schedules = {k: v for k, v in self.schedules.items() if k != zone_id}
        return ScheduleEntity(
            collection_types=self.collection_types,
            schedules=schedules,
            guidelines=self.guidelines,
            special_collections=self.special_collections,
        )

    def validate(self, zone_ids: set[str]) -> None:
        """Validate entries and zone references. Raises ValidationException."""
        orphans = self.orphaned_zone_ids(zone_ids)
        if orphans:
            raise ValidationException(
                f"Schedule references unknown zones: {', '.join(sorted(orphans))}",
                field="schedules",
            )
        type_ids = self.collection_type_ids()
        for zone_id, entries in self.schedules.items():
            for type_id, entry in (entries or {}).items():
                if type_ids and type_id not in type_ids:
                    raise ValidationException(
                        f"Unknown collection type '{type_id}' in zone '{zone_id}'",
                        field="schedules",
                    )
                day = entry.get("dayOfWeek")
                if not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6:
                    raise ValidationException(
                        f"dayOfWeek must be 0-6 for {zone_id}/{type_id}",
                        field="schedules",
                    )
                if entry.get("frequency") not in {f.value for f in Frequency}:
                    raise ValidationException(
                        f"frequency must be weekly or biweekly for {zone_id}/{type_id}",
                        field="schedules",
                    )

    def upcoming_special_collections(
        self, zone_id: str | None, today: date
    ) -> list[dict[str, Any]]:
        """Active special collections dated today or later that apply to zone_id.

        An empty or absent zone list means the collection applies to all zones.
        Sorted by date ascending.
        """
        today_iso = today.isoformat()
        result = []
        for sc in self.special_collections:
            if not sc.get("active"):
                continue
            sc_date = str(sc.get("date") or "")[:10]
            if not sc_date or sc_date < today_iso:
                continue
            zones = sc.get("zones") or []
            if zones and zone_id and zone_id not in zones:
                continue
            result.append(sc)
        return sorted(result, key=lambda sc: str(sc.get("date"))[:10])
