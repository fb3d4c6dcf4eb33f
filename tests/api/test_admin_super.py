"""Tests for super-admin endpoints: municipality lifecycle and admin accounts."""

from httpx import AsyncClient


def _auth(uid: str) -> dict[str, str]:
    return {"Authorization": f"Bearer token-{uid}"}


async def test_tenant_admin_is_refused(client: AsyncClient) -> None:
    response = await client.get("/api/v1/admin/municipalities", headers=_auth("boss"))
    assert response.status_code == 403


async def test_list_includes_inactive(client: AsyncClient) -> None:
    response = await client.get("/api/v1/admin/municipalities", headers=_auth("root"))
    assert response.status_code == 200
    assert {m["id"] for m in response.json()} == {"saint-lazare", "hudson"}


async def test_create_municipality_seeds_defaults(client: AsyncClient, store) -> None:
    response = await client.post(
        "/api/v1/admin/municipalities",
        json={"id": "vaudreuil", "name_en": "Vaudreuil", "name_fr": "Vaudreuil", "population": 40000},
        headers=_auth("root"),
    )
    assert response.status_code == 201
    assert response.json() == {"id": "vaudreuil"}
    doc = store.municipalities["vaudreuil"]
    assert doc["active"] is True
    assert doc["population"] == 40000
    assert doc["colors"]["primary"]
    assert store.schedules["vaudreuil"]["collectionTypes"]

    listed = await client.get("/api/v1/municipalities")
    assert "vaudreuil" in [m["id"] for m in listed.json()]


async def test_create_municipality_rejects_bad_slug(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/admin/municipalities",
        json={"id": "Not A Slug", "name_en": "X", "name_fr": "X"},
        headers=_auth("root"),
    )
    assert response.status_code == 422


async def test_create_duplicate_municipality_is_409(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/admin/municipalities",
        json={"id": "saint-lazare", "name_en": "Again", "name_fr": "Encore"},
        headers=_auth("root"),
    )
    assert response.status_code == 409
    assert response.json()["error"] == "ALREADY_EXISTS"


async def test_deactivate_hides_municipality(client: AsyncClient, store) -> None:
    assert (await client.get("/api/v1/municipalities/saint-lazare")).status_code == 200
    response = await client.put(
        "/api/v1/admin/municipalities/saint-lazare/active",
        json={"active": False},
        headers=_auth("root"),
    )
    assert response.status_code == 204
    assert store.municipalities["saint-lazare"]["deactivatedAt"] is not None
    assert (await client.get("/api/v1/municipalities/saint-lazare")).status_code == 404


async def test_reactivate_unknown_municipality_is_404(client: AsyncClient) -> None:
    response = await client.put(
        "/api/v1/admin/municipalities/nowhere/active",
        json={"active": True},
        headers=_auth("root"),
    )
    assert response.status_code == 404


async def test_create_admin_sends_reset_email(client: AsyncClient, admin_repo, identity) -> None:
    response = await client.post(
        "/api/v1/admin/admins",
        json={
            "email": "New.Editor@Saint-Lazare.ca",
            "name": "New Editor",
            "municipality_id": "saint-lazare",
            "role": "editor",
        },
        headers=_auth("root"),
    )
    assert response.status_code == 201
    uid = response.json()["id"]
    record = admin_repo.admins[uid]
    assert record["email"] == "new.editor@saint-lazare.ca"
    assert record["role"] == "editor"
    assert record["createdBy"] == "root"
    assert identity.reset_emails == ["new.editor@saint-lazare.ca"]


async def test_super_admin_role_cannot_be_granted(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/admin/admins",
        json={"email": "x@saint-lazare.ca", "municipality_id": "saint-lazare", "role": "super-admin"},
        headers=_auth("root"),
    )
    assert response.status_code == 403


async def test_list_admins_filtered_by_municipality(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/admin/admins", params={"municipality_id": "saint-lazare"}, headers=_auth("root")
    )
    assert response.status_code == 200
    assert {a["id"] for a in response.json()} == {"ed", "boss", "gone"}


async def test_deactivating_admin_revokes_sessions(
    client: AsyncClient, admin_repo, identity
) -> None:
    response = await client.put(
        "/api/v1/admin/admins/ed/active", json={"active": False}, headers=_auth("root")
    )
    assert response.status_code == 204
    assert admin_repo.admins["ed"]["active"] is False
    assert identity.signed_out == ["ed"]
    me = await client.get("/api/v1/auth/me", headers=_auth("ed"))
    assert me.status_code == 401


async def test_cannot_deactivate_self(client: AsyncClient) -> None:
    response = await client.put(
        "/api/v1/admin/admins/root/active", json={"active": False}, headers=_auth("root")
    )
    assert response.status_code == 403


async def test_update_admin_keeps_email(client: AsyncClient, admin_repo) -> None:
    response = await client.patch(
        "/api/v1/admin/admins/ed", json={"role": "admin"}, headers=_auth("root")
    )
    assert response.status_code == 204
    assert admin_repo.admins["ed"]["role"] == "admin"
    assert admin_repo.admins["ed"]["email"] == "ed@saint-lazare.ca"


async def test_send_password_reset_for_admin(client: AsyncClient, identity) -> None:
    response = await client.post("/api/v1/admin/admins/boss/password-reset", headers=_auth("root"))
    assert response.status_code == 204
    assert identity.reset_emails == ["boss@saint-lazare.ca"]
