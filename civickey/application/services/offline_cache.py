"""Persisted snapshot cache for the client layer.

One municipality snapshot is kept at a time, tagged with cacheVersion and
fetchedAt. A cached snapshot is always returned when present; is_stale
tells the caller to refetch in the background. Waste items are cached
separately per municipality with their own, longer TTL.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from civickey.application.interfaces.services import IKeyValueStore
from civickey.shared.utils.datetime import parse_iso

logger = logging.getLogger(__name__)

KEY_MUNICIPALITY_ID = "@civickey_municipality_id"
KEY_MUNICIPALITY_DATA = "@civickey_municipality_data"
KEY_ZONE_ID = "@civickey_zone_id"
KEY_LEGACY_ZONE_ID = "@civickey_zone"
KEY_WASTE_ITEMS_PREFIX = "@civickey_waste_items_"

CACHE_VERSION = 2
CACHE_MAX_AGE = 60 * 60
WASTE_ITEMS_TTL = 24 * 60 * 60


@dataclass(frozen=True)
class CachedValue:
    data: Any
    is_stale: bool

    @classmethod
    def empty(cls) -> "CachedValue":
        return cls(None, True)


class OfflineCache:
    def __init__(
        self,
        store: IKeyValueStore,
        *,
        version: int = CACHE_VERSION,
        max_age: float = CACHE_MAX_AGE,
        waste_items_ttl: float = WASTE_ITEMS_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.version = version
        self.max_age = max_age
        self.waste_items_ttl = waste_items_ttl
        self._clock = clock

    async def _read_json(self, key: str) -> Any | None:
        raw = await self.store.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding corrupt cache entry %s", key)
            await self.store.remove_item(key)
            return None

    async def load(self, municipality_id: str) -> CachedValue:
        """Return the cached snapshot for municipality_id and whether it is stale.

        Stale when its age is max_age or more, or its cacheVersion differs
        from the expected version.
        """
        data = await self._read_json(KEY_MUNICIPALITY_DATA)
        if not isinstance(data, dict):
            return CachedValue.empty()
        if data.get("municipalityId") not in (None, municipality_id):
            return CachedValue.empty()
        try:
            fetched_at = parse_iso(data.get("fetchedAt"))
        except ValueError:
            fetched_at = None
        if fetched_at is None:
            return CachedValue(data, True)
        age = self._clock() - fetched_at.timestamp()
        is_stale = age >= self.max_age or data.get("cacheVersion") != self.version
        return CachedValue(data, is_stale)

    async def save(self, municipality_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Persist a snapshot; stamps cacheVersion (and fetchedAt when missing)."""
        blob = dict(data)
        blob["municipalityId"] = municipality_id
        blob["cacheVersion"] = self.version
        if not blob.get("fetchedAt"):
            blob["fetchedAt"] = datetime.fromtimestamp(self._clock(), UTC).isoformat()
        await self.store.set_item(KEY_MUNICIPALITY_DATA, json.dumps(blob, default=str))
        return blob

    async def clear(self) -> None:
        await self.store.remove_item(KEY_MUNICIPALITY_DATA)

    async def load_waste_items(self, municipality_id: str) -> CachedValue:
        """Cached catalog for municipality_id; stale once older than waste_items_ttl."""
        blob = await self._read_json(f"{KEY_WASTE_ITEMS_PREFIX}{municipality_id}")
        if not isinstance(blob, dict) or "data" not in blob:
            return CachedValue.empty()
        timestamp = float(blob.get("timestamp") or 0)
        return CachedValue(blob["data"], self._clock() - timestamp > self.waste_items_ttl)

    async def save_waste_items(
        self, municipality_id: str, items: list[dict[str, Any]]
    ) -> None:
        blob = {"data": items, "timestamp": self._clock()}
        await self.store.set_item(
            f"{KEY_WASTE_ITEMS_PREFIX}{municipality_id}", json.dumps(blob, default=str)
        )
