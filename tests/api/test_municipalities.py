"""Tests for the public municipality API (no authentication)."""

from httpx import AsyncClient


async def test_list_only_active_municipalities(client: AsyncClient) -> None:
    response = await client.get("/api/v1/municipalities")
    assert response.status_code == 200
    ids = [m["id"] for m in response.json()]
    assert ids == ["saint-lazare"]


async def test_inactive_municipality_is_404(client: AsyncClient) -> None:
    response = await client.get("/api/v1/municipalities/hudson")
    assert response.status_code == 404
    assert response.json()["error"] == "TENANT_NOT_FOUND"


async def test_unknown_municipality_is_404(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/municipalities/nowhere/zones")).status_code == 404


async def test_malformed_municipality_id_is_404(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/municipalities/Bad_Id/zones")).status_code == 404


async def test_config_includes_colors(client: AsyncClient) -> None:
    response = await client.get("/api/v1/municipalities/saint-lazare")
    assert response.status_code == 200
    assert response.json()["colors"]["primary"] == "#0D5C63"


async def test_zone_schedule_returns_one_zone(client: AsyncClient) -> None:
    response = await client.get("/api/v1/municipalities/saint-lazare/zones/east/schedule")
    assert response.status_code == 200
    assert response.json() == {"recycling": {"dayOfWeek": 2, "frequency": "weekly"}}


async def test_unknown_zone_schedule_is_404(client: AsyncClient) -> None:
    response = await client.get("/api/v1/municipalities/saint-lazare/zones/north/schedule")
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_snapshot_has_every_section(client: AsyncClient) -> None:
    response = await client.get("/api/v1/municipalities/saint-lazare/snapshot")
    assert response.status_code == 200
    data = response.json()
    assert data["municipalityId"] == "saint-lazare"
    assert [z["id"] for z in data["zones"]] == ["east", "west"]
    assert [e["id"] for e in data["events"]] == ["e1"]
    assert [a["id"] for a in data["alerts"]] == ["a1"]
    assert data["errors"] == {}
    assert data["fetchedAt"]


async def test_snapshot_does_not_leak_other_tenant(client: AsyncClient, store) -> None:
    store._coll("other-town", "events")["x1"] = {"title": "Elsewhere", "date": "2099-01-01"}
    response = await client.get("/api/v1/municipalities/saint-lazare/events")
    assert [e["id"] for e in response.json()] == ["e1"]


async def test_event_detail_and_missing_event(client: AsyncClient) -> None:
    found = await client.get("/api/v1/municipalities/saint-lazare/events/e1")
    assert found.status_code == 200
    assert found.json()["date"] == "2099-06-01"
    missing = await client.get("/api/v1/municipalities/saint-lazare/events/nope")
    assert missing.status_code == 404


async def test_waste_search(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/municipalities/saint-lazare/waste-items/search", params={"q": "Pap"}
    )
    assert response.status_code == 200
    assert [i["id"] for i in response.json()] == ["w1"]


async def test_waste_search_short_query_is_empty(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/municipalities/saint-lazare/waste-items/search", params={"q": "p"}
    )
    assert response.json() == []


async def test_unpublished_page_is_404(client: AsyncClient, store) -> None:
    store._coll("saint-lazare", "pages")["draft-page"] = {
        "slug": "draft-page",
        "type": "text",
        "status": "draft",
    }
    response = await client.get("/api/v1/municipalities/saint-lazare/pages/draft-page")
    assert response.status_code == 404


async def test_events_started_before_today_are_not_upcoming(client: AsyncClient, store) -> None:
    """Upcoming means the start date is today or later, even for multi-day events."""
    store._coll("saint-lazare", "events")["long"] = {
        "title": "Exhibit",
        "date": "2000-01-01",
        "endDate": "2999-01-01",
    }
    response = await client.get("/api/v1/municipalities/saint-lazare/events")
    assert [e["id"] for e in response.json()] == ["e1"]
