"""Tests for tenant-scoped admin content endpoints (RBAC and tenant isolation)."""

from httpx import AsyncClient


def _auth(uid: str, municipality: str | None = None) -> dict[str, str]:
    headers = {"Authorization": f"Bearer token-{uid}"}
    if municipality:
        headers["X-Municipality-ID"] = municipality
    return headers


async def test_admin_routes_require_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/admin/content/events")
    assert response.status_code == 401


async def test_editor_creates_and_lists_events(client: AsyncClient, store) -> None:
    created = await client.post(
        "/api/v1/admin/content/events",
        json={"id": "forced", "title": {"en": "Cleanup", "fr": "Corvée"}, "date": "2099-04-22"},
        headers=_auth("ed"),
    )
    assert created.status_code == 201
    event_id = created.json()["id"]
    assert event_id != "forced"
    stored = store.content["saint-lazare"]["events"][event_id]
    assert stored["title"]["en"] == "Cleanup"
    assert "createdAt" in stored

    listed = await client.get("/api/v1/admin/content/events", headers=_auth("ed"))
    assert {e["id"] for e in listed.json()} == {"e1", event_id}


async def test_update_and_delete_item(client: AsyncClient, store) -> None:
    updated = await client.patch(
        "/api/v1/admin/content/events/e1",
        json={"location": "Town hall"},
        headers=_auth("ed"),
    )
    assert updated.status_code == 204
    assert store.content["saint-lazare"]["events"]["e1"]["location"] == "Town hall"

    deleted = await client.delete("/api/v1/admin/content/events/e1", headers=_auth("ed"))
    assert deleted.status_code == 204
    assert "e1" not in store.content["saint-lazare"]["events"]


async def test_unknown_feature_is_404(client: AsyncClient) -> None:
    response = await client.get("/api/v1/admin/content/invoices", headers=_auth("ed"))
    assert response.status_code == 404


async def test_editor_cannot_manage_zones(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/admin/zones", json={"name": {"en": "North"}}, headers=_auth("ed")
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_admin_creates_zone_with_id(client: AsyncClient, store) -> None:
    response = await client.post(
        "/api/v1/admin/zones",
        json={"id": "north", "name": {"en": "North", "fr": "Nord"}, "color": "#123456"},
        headers=_auth("boss"),
    )
    assert response.status_code == 201
    assert response.json() == {"id": "north"}
    assert store.content["saint-lazare"]["zones"]["north"]["color"] == "#123456"


async def test_schedule_update_rejects_unknown_zone(client: AsyncClient) -> None:
    response = await client.put(
        "/api/v1/admin/schedule",
        json={"schedules": {"north": {"recycling": {"dayOfWeek": 1, "frequency": "weekly"}}}},
        headers=_auth("ed"),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_schedule_update_merges(client: AsyncClient, store) -> None:
    response = await client.put(
        "/api/v1/admin/schedule",
        json={"guidelines": {"recycling": {"en": ["Rinse containers"]}}},
        headers=_auth("ed"),
    )
    assert response.status_code == 204
    schedule = store.schedules["saint-lazare"]
    assert schedule["guidelines"]["recycling"]["en"] == ["Rinse containers"]
    assert "east" in schedule["schedules"]


async def test_page_lifecycle(client: AsyncClient, store) -> None:
    created = await client.post(
        "/api/v1/admin/pages",
        json={"slug": "Garbage Info", "type": "text", "title": {"en": "Garbage"}},
        headers=_auth("ed"),
    )
    assert created.status_code == 201
    assert created.json()["id"] == "garbage-info"

    public = await client.get("/api/v1/municipalities/saint-lazare/pages/garbage-info")
    assert public.status_code == 404

    published = await client.post(
        "/api/v1/admin/pages/garbage-info/publish",
        json={"published": True},
        headers=_auth("ed"),
    )
    assert published.status_code == 204
    public = await client.get("/api/v1/municipalities/saint-lazare/pages/garbage-info")
    assert public.status_code == 200


async def test_duplicate_page_slug_rejected(client: AsyncClient) -> None:
    body = {"slug": "about", "type": "text", "title": "About"}
    first = await client.post("/api/v1/admin/pages", json=body, headers=_auth("ed"))
    second = await client.post("/api/v1/admin/pages", json=body, headers=_auth("ed"))
    assert first.status_code == 201
    assert second.status_code == 400


async def test_editor_cannot_edit_settings(client: AsyncClient) -> None:
    response = await client.patch(
        "/api/v1/admin/settings", json={"logo": "x.png"}, headers=_auth("ed")
    )
    assert response.status_code == 403


async def test_settings_update_invalidates_public_config(client: AsyncClient) -> None:
    before = await client.get("/api/v1/municipalities/saint-lazare")
    assert before.json()["colors"]["primary"] == "#0D5C63"
    response = await client.patch(
        "/api/v1/admin/settings",
        json={"colors": {"primary": "#000000", "secondary": "#FFFFFF"}},
        headers=_auth("boss"),
    )
    assert response.status_code == 204
    after = await client.get("/api/v1/municipalities/saint-lazare")
    assert after.json()["colors"]["primary"] == "#000000"


async def test_website_domain_change_goes_to_registrar(client: AsyncClient, registrar) -> None:
    response = await client.patch(
        "/api/v1/admin/website",
        json={"customDomain": "ville.saint-lazare.ca"},
        headers=_auth("boss"),
    )
    assert response.status_code == 200
    assert response.json()["customDomain"] == "ville.saint-lazare.ca"
    assert registrar.calls == [
        ("remove", "www.saint-lazare.ca"),
        ("add", "ville.saint-lazare.ca"),
    ]


async def test_tenant_admin_header_cannot_reach_other_tenant(client: AsyncClient, store) -> None:
    """X-Municipality-ID is ignored for tenant admins; writes stay in their municipality."""
    response = await client.post(
        "/api/v1/admin/content/events",
        json={"title": "Sneaky", "date": "2099-01-01"},
        headers=_auth("ed", "hudson"),
    )
    assert response.status_code == 201
    assert response.json()["id"] in store.content["saint-lazare"]["events"]
    assert "events" not in store.content.get("hudson", {})


async def test_super_admin_needs_selection(client: AsyncClient) -> None:
    response = await client.get("/api/v1/admin/content/events", headers=_auth("root"))
    assert response.status_code == 400


async def test_super_admin_acts_on_selection(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/admin/content/events", headers=_auth("root", "saint-lazare")
    )
    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == ["e1"]
