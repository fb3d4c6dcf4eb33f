"""Client data loader: restore, legacy migration and stale-result handling."""

import asyncio
import json
from datetime import UTC, datetime

import pytest

from civickey.application.services.offline_cache import (
    KEY_LEGACY_ZONE_ID,
    KEY_MUNICIPALITY_DATA,
    KEY_MUNICIPALITY_ID,
    KEY_ZONE_ID,
    OfflineCache,
)
from civickey.application.use_cases.municipality_sync import (
    LEGACY_MUNICIPALITY_ID,
    MunicipalityDataLoader,
)
from civickey.infrastructure.storage import MemoryKeyValueStore

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC).timestamp()


def _snapshot(municipality_id: str, zones=None) -> dict:
    return {
        "municipalityId": municipality_id,
        "config": {"id": municipality_id, "colors": {"primary": "#111111"}},
        "zones": zones if zones is not None else [{"id": "east"}, {"id": "west"}],
        "schedule": {
            "collectionTypes": [{"id": "recycling"}],
            "schedules": {"east": {"recycling": {"dayOfWeek": 2, "frequency": "weekly"}}},
        },
        "events": [],
        "alerts": [],
        "facilities": [],
        "fetchedAt": datetime.fromtimestamp(NOW, UTC).isoformat(),
    }


class ControlledFetcher:
    """Fetcher whose responses are released by the test."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.fail = False
        self.waste_items: dict[str, list] = {}

    def hold(self, municipality_id: str) -> asyncio.Event:
        self.gates[municipality_id] = asyncio.Event()
        return self.gates[municipality_id]

    async def fetch_all(self, municipality_id: str) -> dict:
        self.calls.append(municipality_id)
        gate = self.gates.get(municipality_id)
        if gate is not None:
            await gate.wait()
        if self.fail:
            raise RuntimeError("offline")
        return _snapshot(municipality_id)

    async def fetch_waste_items(self, municipality_id: str) -> list:
        self.calls.append(f"waste:{municipality_id}")
        if self.fail:
            raise RuntimeError("offline")
        return self.waste_items.get(municipality_id, [])


class Clock:
    def __init__(self) -> None:
        self.now = NOW

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def fetcher() -> ControlledFetcher:
    return ControlledFetcher()


@pytest.fixture
def loader(kv, fetcher, clock) -> MunicipalityDataLoader:
    return MunicipalityDataLoader(kv, fetcher, OfflineCache(kv, clock=clock))


async def test_restore_without_selection(loader, fetcher) -> None:
    assert await loader.restore() is None
    assert fetcher.calls == []


async def test_legacy_zone_key_migrates_to_default_municipality(kv, loader) -> None:
    await kv.set_item(KEY_LEGACY_ZONE_ID, "east")
    assert await loader.restore() == LEGACY_MUNICIPALITY_ID
    assert await kv.get_item(KEY_MUNICIPALITY_ID) == "saint-lazare"
    assert await kv.get_item(KEY_ZONE_ID) == "east"
    assert loader.zone_schedule() == {"recycling": {"dayOfWeek": 2, "frequency": "weekly"}}


async def test_fresh_cache_is_served_without_fetch(kv, loader, fetcher, clock) -> None:
    await kv.set_item(KEY_MUNICIPALITY_ID, "saint-lazare")
    await OfflineCache(kv, clock=clock).save("saint-lazare", _snapshot("saint-lazare"))
    await loader.restore()
    assert loader.data["municipalityId"] == "saint-lazare"
    assert loader.is_stale is False
    assert fetcher.calls == []


async def test_stale_cache_is_served_then_refreshed(kv, loader, fetcher, clock) -> None:
    await kv.set_item(KEY_MUNICIPALITY_ID, "saint-lazare")
    await OfflineCache(kv, clock=clock).save("saint-lazare", _snapshot("saint-lazare"))
    clock.now += 2 * 60 * 60
    await loader.restore()
    assert loader.is_stale is True
    await loader.wait_background()
    assert fetcher.calls == ["saint-lazare"]
    assert loader.is_stale is False


async def test_result_for_previous_selection_is_discarded(kv, loader, fetcher) -> None:
    gate = fetcher.hold("saint-lazare")
    first = asyncio.ensure_future(loader.select_municipality("saint-lazare"))
    await asyncio.sleep(0)

    await loader.select_municipality("hudson")
    gate.set()
    assert await first is None

    assert loader.municipality_id == "hudson"
    assert loader.data["municipalityId"] == "hudson"
    stored = json.loads(await kv.get_item(KEY_MUNICIPALITY_DATA))
    assert stored["municipalityId"] == "hudson"


async def test_single_zone_is_auto_selected(kv, fetcher, clock) -> None:
    class OneZoneFetcher(ControlledFetcher):
        async def fetch_all(self, municipality_id: str) -> dict:
            return _snapshot(municipality_id, zones=[{"id": "only"}])

    loader = MunicipalityDataLoader(kv, OneZoneFetcher(), OfflineCache(kv, clock=clock))
    await loader.select_municipality("hudson")
    assert loader.zone_id == "only"
    assert await kv.get_item(KEY_ZONE_ID) == "only"


async def test_switch_clears_zone(kv, loader) -> None:
    await loader.select_municipality("saint-lazare")
    await loader.select_zone("east")
    await loader.select_municipality("hudson")
    assert loader.zone_id is None
    assert await kv.get_item(KEY_ZONE_ID) is None


async def test_failed_refresh_keeps_cached_data(kv, loader, fetcher, clock) -> None:
    await kv.set_item(KEY_MUNICIPALITY_ID, "saint-lazare")
    await OfflineCache(kv, clock=clock).save("saint-lazare", _snapshot("saint-lazare"))
    await loader.restore()
    fetcher.fail = True
    assert await loader.refresh() is None
    assert loader.error == "Failed to refresh data"
    assert loader.data["municipalityId"] == "saint-lazare"


async def test_theme_colors_fall_back_to_defaults(loader) -> None:
    assert loader.theme_colors()["primary"]
    await loader.select_municipality("saint-lazare")
    assert loader.theme_colors() == {"primary": "#111111"}


async def test_waste_items_cached_and_searched(loader, fetcher) -> None:
    fetcher.waste_items["saint-lazare"] = [{"id": "w1", "searchTerms": ["papier"]}]
    await loader.select_municipality("saint-lazare")
    await loader.load_waste_items()
    await loader.load_waste_items()
    assert fetcher.calls.count("waste:saint-lazare") == 1
    assert [i["id"] for i in loader.search("pap")] == ["w1"]


async def test_clear_selection(kv, loader) -> None:
    await loader.select_municipality("saint-lazare")
    await loader.clear_selection()
    assert await kv.get_item(KEY_MUNICIPALITY_ID) is None
    assert await kv.get_item(KEY_MUNICIPALITY_DATA) is None
    assert loader.data is None
