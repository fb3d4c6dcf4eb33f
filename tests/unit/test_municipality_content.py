"""Public read use cases over the in-memory tenant store."""

from datetime import UTC, datetime

import pytest

from civickey.application.use_cases.municipality_content import MunicipalityContentService
from civickey.domain.exceptions import ResourceNotFoundException, TenantNotFoundException
from civickey.infrastructure.cache import MemoryCache

NOW = datetime(2025, 6, 1, 16, 0, tzinfo=UTC)


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def service(store, cache) -> MunicipalityContentService:
    return MunicipalityContentService(store, store, cache, clock=lambda: NOW)


async def test_zone_schedule_returns_only_that_zone(service) -> None:
    assert await service.get_zone_schedule("saint-lazare", "east") == {
        "recycling": {"dayOfWeek": 2, "frequency": "weekly"}
    }
    assert await service.get_zone_schedule("saint-lazare", "west") == {
        "recycling": {"dayOfWeek": 4, "frequency": "biweekly"}
    }


async def test_unknown_zone_is_not_found(service) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.get_zone_schedule("saint-lazare", "north")


async def test_zone_with_no_entries_is_empty(service, store) -> None:
    store._coll("saint-lazare", "zones")["north"] = {"name": {"en": "North"}}
    assert await service.get_zone_schedule("saint-lazare", "north") == {}


async def test_config_is_cached(service, store) -> None:
    await service.get_config("saint-lazare")
    await service.get_config("saint-lazare")
    assert store.queries.count(("get_config", "saint-lazare")) == 1

    await service.invalidate("saint-lazare")
    await service.get_config("saint-lazare")
    assert store.queries.count(("get_config", "saint-lazare")) == 2


async def test_inactive_municipality_is_not_found(service) -> None:
    with pytest.raises(TenantNotFoundException):
        await service.require_active_config("hudson")
    with pytest.raises(TenantNotFoundException):
        await service.require_active_config("nowhere")


async def test_active_listing_excludes_inactive(service) -> None:
    listing = await service.list_active_municipalities()
    assert [m["id"] for m in listing] == ["saint-lazare"]
    assert listing[0]["nameEn"] == "Saint-Lazare"


async def test_fetch_all_returns_only_requested_tenant(service, store) -> None:
    store.municipalities["hudson"]["active"] = True
    store._coll("hudson", "events")["h1"] = {"title": "Hudson fair", "date": "2099-01-01"}

    snapshot = await service.fetch_all("saint-lazare")
    assert snapshot.municipality_id == "saint-lazare"
    assert snapshot.config["id"] == "saint-lazare"
    assert [z["id"] for z in snapshot.zones] == ["east", "west"]
    assert [e["id"] for e in snapshot.events] == ["e1"]
    assert [a["id"] for a in snapshot.alerts] == ["a1"]
    assert snapshot.errors == {}

    payload = snapshot.to_dict()
    assert payload["fetchedAt"] == NOW.isoformat()


async def test_fetch_all_marks_failed_section(service, store, monkeypatch) -> None:
    async def broken(municipality_id):
        raise RuntimeError("facilities unavailable")

    monkeypatch.setattr(store, "get_facilities", broken)
    snapshot = await service.fetch_all("saint-lazare")
    assert snapshot.facilities == []
    assert snapshot.errors == {"facilities": "facilities unavailable"}
    assert snapshot.is_partial
    assert snapshot.zones


async def test_page_must_be_published(service, store) -> None:
    store._coll("saint-lazare", "pages")["about"] = {"status": "draft", "title": "About"}
    with pytest.raises(ResourceNotFoundException):
        await service.get_page("saint-lazare", "about")
    store._coll("saint-lazare", "pages")["about"]["status"] = "published"
    assert (await service.get_page("saint-lazare", "about"))["id"] == "about"


async def test_waste_search(service) -> None:
    results = await service.search_waste_items("saint-lazare", "Pap")
    assert [r["id"] for r in results] == ["w1"]
    assert await service.search_waste_items("saint-lazare", "p") == []


async def test_today_is_municipality_local(store, cache) -> None:
    late_utc = datetime(2025, 6, 2, 2, 0, tzinfo=UTC)
    service = MunicipalityContentService(store, store, cache, clock=lambda: late_utc)
    assert service.today().isoformat() == "2025-06-01"
