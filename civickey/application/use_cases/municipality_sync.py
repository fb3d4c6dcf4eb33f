"""Client-side municipality data loader.

Keeps the selected municipality and zone in local storage, serves the
cached snapshot immediately and refreshes it in the background when it
is stale. A fetch that completes after the user switched to another
municipality is dropped instead of overwriting the newer selection.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from datetime import date
from typing import Any

from civickey.application.interfaces.services import IKeyValueStore, ISnapshotFetcher
from civickey.application.services.offline_cache import (
    KEY_LEGACY_ZONE_ID,
    KEY_MUNICIPALITY_DATA,
    KEY_MUNICIPALITY_ID,
    KEY_ZONE_ID,
    OfflineCache,
)
from civickey.application.services.waste_search import search_waste_items
from civickey.core.constants import DEFAULT_COLORS
from civickey.domain.entities.content import auto_selected_zone
from civickey.domain.entities.schedule import ScheduleEntity

logger = logging.getLogger(__name__)

# Installs from before municipality selection existed only stored a zone.
LEGACY_MUNICIPALITY_ID = "saint-lazare"


class MunicipalityDataLoader:
    def __init__(
        self,
        store: IKeyValueStore,
        fetcher: ISnapshotFetcher,
        cache: OfflineCache,
        *,
        spawn: Callable[[Coroutine[Any, Any, Any]], Any] | None = None,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.cache = cache
        self._spawn = spawn or asyncio.ensure_future
        self._background: set[Any] = set()
        self.municipality_id: str | None = None
        self.zone_id: str | None = None
        self.data: dict[str, Any] | None = None
        self.waste_items: list[dict[str, Any]] = []
        self.is_stale = False
        self.error: str | None = None

    async def restore(self) -> str | None:
        """Load saved selections and cached data; return the municipality id.

        Migrates the legacy zone key. A stale snapshot is served and a
        refresh is started in the background; with no snapshot the fetch
        is awaited.
        """
        saved_id = await self.store.get_item(KEY_MUNICIPALITY_ID)
        saved_zone = await self.store.get_item(KEY_ZONE_ID)
        legacy_zone = await self.store.get_item(KEY_LEGACY_ZONE_ID)

        municipality_id = saved_id or (LEGACY_MUNICIPALITY_ID if legacy_zone else None)
        if not municipality_id:
            return None
        if not saved_id:
            await self.store.set_item(KEY_MUNICIPALITY_ID, municipality_id)
        if not saved_zone and legacy_zone:
            await self.store.set_item(KEY_ZONE_ID, legacy_zone)
        self.municipality_id = municipality_id
        self.zone_id = saved_zone or legacy_zone

        cached = await self.cache.load(municipality_id)
        if cached.data is None:
            await self.refresh()
            return municipality_id
        self.data = cached.data
        self.is_stale = cached.is_stale
        if cached.is_stale:
            self._in_background(self.refresh())
        return municipality_id

    def _in_background(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = self._spawn(coro)
        if isinstance(task, asyncio.Future):
            self._background.add(task)
            task.add_done_callback(self._background.discard)

    async def wait_background(self) -> None:
        """Wait for pending background refreshes (shutdown and tests)."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    async def refresh(self) -> dict[str, Any] | None:
        """Fetch and persist the snapshot for the current municipality.

        Returns None when there is no selection, the fetch fails (cached
        data stays in place) or the selection changed while fetching.
        """
        requested = self.municipality_id
        if not requested:
            return None
        try:
            snapshot = await self.fetcher.fetch_all(requested)
        except Exception:
            logger.exception("Error refreshing data for %s", requested)
            self.error = "Failed to refresh data"
            return None
        if requested != self.municipality_id:
            logger.debug(
                "Discarding snapshot for %s; current municipality is %s",
                requested,
                self.municipality_id,
            )
            return None
        blob = await self.cache.save(requested, snapshot)
        self.data = blob
        self.is_stale = False
        self.error = None
        if self.zone_id is None:
            zone = auto_selected_zone(blob.get("zones") or [])
            if zone:
                await self.select_zone(zone)
        return blob

    async def select_municipality(self, municipality_id: str) -> dict[str, Any] | None:
        """Switch municipality: clear the zone and cached data, then fetch."""
        self.municipality_id = municipality_id
        self.zone_id = None
        self.data = None
        self.waste_items = []
        await self.store.set_item(KEY_MUNICIPALITY_ID, municipality_id)
        await self.store.remove_item(KEY_ZONE_ID)
        await self.cache.clear()
        return await self.refresh()

    async def select_zone(self, zone_id: str) -> None:
        self.zone_id = zone_id
        await self.store.set_item(KEY_ZONE_ID, zone_id)

    async def clear_selection(self) -> None:
        self.municipality_id = None
        self.zone_id = None
        self.data = None
        self.waste_items = []
        await self.store.multi_remove([KEY_MUNICIPALITY_ID, KEY_ZONE_ID, KEY_MUNICIPALITY_DATA])

    def _schedule(self) -> ScheduleEntity:
        return ScheduleEntity.from_document((self.data or {}).get("schedule"))

    def zone_schedule(self) -> dict[str, dict[str, Any]] | None:
        """Collection entries for the selected zone, or None."""
        if not self.zone_id:
            return None
        return self._schedule().zone_schedule(self.zone_id)

    def upcoming_special_collections(self, today: date) -> list[dict[str, Any]]:
        return self._schedule().upcoming_special_collections(self.zone_id, today)

    def theme_colors(self) -> dict[str, str]:
        config = (self.data or {}).get("config") or {}
        return config.get("colors") or dict(DEFAULT_COLORS)

    async def load_waste_items(self) -> list[dict[str, Any]]:
        """Cached catalog, refetched when older than its TTL.

        A catalog that arrives after a municipality switch is dropped.
        """
        requested = self.municipality_id
        if not requested:
            return []
        cached = await self.cache.load_waste_items(requested)
        if cached.data is not None and not cached.is_stale:
            self.waste_items = cached.data
            return self.waste_items
        try:
            items = await self.fetcher.fetch_waste_items(requested)
        except Exception:
            logger.exception("Error loading waste items for %s", requested)
            items = None
        if requested != self.municipality_id:
            logger.debug("Discarding waste items for %s", requested)
            return self.waste_items
        if items is None:
            self.waste_items = cached.data or []
            return self.waste_items
        await self.cache.save_waste_items(requested, items)
        self.waste_items = items
        return items

    def search(self, query: str | None) -> list[dict[str, Any]]:
        return search_waste_items(query, self.waste_items)
