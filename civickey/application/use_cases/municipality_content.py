"""Public read use cases: municipality config, zone schedules and the aggregate fetch."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from civickey.application.dtos.snapshot import SNAPSHOT_SECTIONS, MunicipalitySnapshot
from civickey.application.interfaces.repositories import IContentStore, IMunicipalityDirectory
from civickey.application.interfaces.services import ICacheService
from civickey.application.services.waste_search import search_waste_items
from civickey.core.cache_keys import (
    active_municipalities_key,
    municipality_config_key,
    municipality_pattern,
)
from civickey.domain.entities.municipality import MunicipalityEntity
from civickey.domain.entities.schedule import ScheduleEntity
from civickey.domain.exceptions import (
    ResourceNotFoundException,
    TenantNotFoundException,
    ValidationException,
)
from civickey.shared.utils.datetime import local_today, utc_now

logger = logging.getLogger(__name__)


async def invalidate_municipality(cache: ICacheService, municipality_id: str) -> None:
    """Drop cached reads for one municipality and the active listing."""
    await cache.delete_pattern(municipality_pattern(municipality_id))
    await cache.delete(active_municipalities_key())


class MunicipalityContentService:
    """Tenant-scoped reads for the public API, the website routes and the app.

    Municipality configs are cached (Redis when available) because every
    public request reads one; content lists are read through on each call.
    """

    def __init__(
        self,
        directory: IMunicipalityDirectory,
        content: IContentStore,
        cache: ICacheService,
        *,
        tz_name: str = "America/Toronto",
        config_ttl: int = 900,
        events_limit: int = 5,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.directory = directory
        self.content = content
        self.cache = cache
        self.tz_name = tz_name
        self.config_ttl = config_ttl
        self.events_limit = events_limit
        self._clock = clock

    def today(self) -> date:
        """Municipality-local calendar date."""
        return local_today(self.tz_name, self._clock())

    async def get_config(self, municipality_id: str) -> dict[str, Any] | None:
        key = municipality_config_key(municipality_id)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        config = await self.directory.get_config(municipality_id)
        if config is not None:
            await self.cache.set(key, config, ttl=self.config_ttl)
        return config

    async def require_active_config(self, municipality_id: str) -> dict[str, Any]:
        """Return the config of an active municipality; raise TenantNotFoundException otherwise."""
        config = await self.get_config(municipality_id)
        if config is None or config.get("active") is False:
            raise TenantNotFoundException(municipality_id)
        return config

    async def list_active_municipalities(self) -> list[dict[str, Any]]:
        """Active municipalities for the selection screen, sorted by English name."""
        key = active_municipalities_key()
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        summaries = []
        for doc in await self.directory.list_active():
            try:
                entity = MunicipalityEntity.from_document(doc["id"], doc)
            except ValidationException:
                logger.warning("Skipping malformed municipality document %s", doc.get("id"))
                continue
            summaries.append(entity.summary())
        summaries.sort(key=lambda m: (m["nameEn"] or "").casefold())
        await self.cache.set(key, summaries, ttl=self.config_ttl)
        return summaries

    async def get_schedule(self, municipality_id: str) -> ScheduleEntity:
        return ScheduleEntity.from_document(await self.content.get_schedule(municipality_id))

    async def get_zone_schedule(
        self, municipality_id: str, zone_id: str
    ) -> dict[str, dict[str, Any]]:
        """Collection entries for exactly one zone; unknown zone raises ResourceNotFoundException."""
        zones = await self.content.get_zones(municipality_id)
        if zone_id not in {z.get("id") for z in zones}:
            raise ResourceNotFoundException("Zone", zone_id)
        schedule = await self.get_schedule(municipality_id)
        return schedule.zone_schedule(zone_id) or {}

    async def get_upcoming_special_collections(
        self, municipality_id: str, zone_id: str | None = None
    ) -> list[dict[str, Any]]:
        schedule = await self.get_schedule(municipality_id)
        return schedule.upcoming_special_collections(zone_id, self.today())

    async def get_zones(self, municipality_id: str) -> list[dict[str, Any]]:
        return await self.content.get_zones(municipality_id)

    async def get_upcoming_events(
        self, municipality_id: str, limit: int | None = None
    ) -> list[dict[str, Any]]:
        return await self.content.get_upcoming_events(municipality_id, self.today(), limit)

    async def get_event(self, municipality_id: str, event_id: str) -> dict[str, Any]:
        return await self._get_one(municipality_id, "events", event_id, "Event")

    async def get_active_alerts(self, municipality_id: str) -> list[dict[str, Any]]:
        return await self.content.get_active_alerts(municipality_id, self.today())

    async def get_facilities(self, municipality_id: str) -> list[dict[str, Any]]:
        return await self.content.get_facilities(municipality_id)

    async def get_facility(self, municipality_id: str, facility_id: str) -> dict[str, Any]:
        return await self._get_one(municipality_id, "facilities", facility_id, "Facility")

    async def get_road_closures(self, municipality_id: str) -> list[dict[str, Any]]:
        return await self.content.get_road_closures(municipality_id)

    async def get_published_pages(self, municipality_id: str) -> list[dict[str, Any]]:
        return await self.content.get_published_pages(municipality_id)

    async def get_page(self, municipality_id: str, slug: str) -> dict[str, Any]:
        page = await self.content.get_page_by_slug(municipality_id, slug)
        if page is None:
            raise ResourceNotFoundException("Page", slug)
        return page

    async def get_waste_items(self, municipality_id: str) -> list[dict[str, Any]]:
        return await self.content.get_waste_items(municipality_id)

    async def search_waste_items(
        self, municipality_id: str, query: str | None
    ) -> list[dict[str, Any]]:
        return search_waste_items(query, await self.get_waste_items(municipality_id))

    async def _get_one(
        self, municipality_id: str, collection: str, doc_id: str, label: str
    ) -> dict[str, Any]:
        doc = await self.content.get_document(municipality_id, collection, doc_id)
        if doc is None:
            raise ResourceNotFoundException(label, doc_id)
        return doc

    async def fetch_all(self, municipality_id: str) -> MunicipalitySnapshot:
        """Read every snapshot section concurrently.

        One failing read does not block the others: its section is left
        empty and the failure is recorded in the snapshot's errors.
        """
        today = self.today()
        results = await asyncio.gather(
            self.get_config(municipality_id),
            self.content.get_zones(municipality_id),
            self.content.get_schedule(municipality_id),
            self.content.get_upcoming_events(municipality_id, today, self.events_limit),
            self.content.get_active_alerts(municipality_id, today),
            self.content.get_facilities(municipality_id),
            return_exceptions=True,
        )
        sections: dict[str, Any] = {}
        errors: dict[str, str] = {}
        for name, result in zip(SNAPSHOT_SECTIONS, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "fetch_all: %s failed for %s: %s", name, municipality_id, result
                )
                errors[name] = str(result) or result.__class__.__name__
                result = None if name in ("config", "schedule") else []
            sections[name] = result
        return MunicipalitySnapshot(
            municipality_id=municipality_id,
            fetched_at=self._clock(),
            errors=errors,
            **sections,
        )

    async def invalidate(self, municipality_id: str) -> None:
        await invalidate_municipality(self.cache, municipality_id)
