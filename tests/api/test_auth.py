"""Tests for admin console auth endpoints (sign-in, sign-out, reset, profile, switch)."""

from httpx import AsyncClient

from civickey.application.services import identity_messages as msg


def _auth(uid: str) -> dict[str, str]:
    return {"Authorization": f"Bearer token-{uid}"}


async def test_sign_in_missing_body_returns_422(client: AsyncClient) -> None:
    """POST /api/v1/auth/sign-in with no fields fails validation."""
    response = await client.post("/api/v1/auth/sign-in", json={})
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_sign_in_returns_tokens_and_profile(client: AsyncClient, admin_repo) -> None:
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "ed@saint-lazare.ca", "password": "pw-ed"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["id_token"] == "token-ed"
    assert data["token_type"] == "bearer"
    assert data["admin"]["role"] == "editor"
    assert data["admin"]["municipality_id"] == "saint-lazare"
    assert data["admin"]["active_municipality_id"] == "saint-lazare"
    assert "lastLogin" in admin_repo.admins["ed"]


async def test_sign_in_wrong_password_returns_fixed_message(client: AsyncClient) -> None:
    """Wrong password and unknown email share one message."""
    wrong = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "ed@saint-lazare.ca", "password": "nope"},
    )
    unknown = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "nobody@saint-lazare.ca", "password": "nope"},
    )
    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json()["message"] == msg.INVALID_CREDENTIALS
    assert unknown.json()["message"] == msg.INVALID_CREDENTIALS


async def test_sign_in_without_admin_record_is_signed_out(
    client: AsyncClient, identity
) -> None:
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "stranger@example.com", "password": "pw-x"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == msg.NOT_AUTHORIZED
    assert identity.signed_out == ["stranger"]


async def test_sign_in_deactivated_admin(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "gone@saint-lazare.ca", "password": "pw-gone"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == msg.ACCOUNT_DEACTIVATED


async def test_me_requires_bearer_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


async def test_me_rejects_invalid_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer junk"})
    assert response.status_code == 401


async def test_me_returns_profile(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me", headers=_auth("boss"))
    assert response.status_code == 200
    data = response.json()
    assert data["uid"] == "boss"
    assert data["role"] == "admin"
    assert data["active_municipality_id"] == "saint-lazare"


async def test_me_ignores_municipality_header_for_tenant_admin(client: AsyncClient) -> None:
    headers = {**_auth("boss"), "X-Municipality-ID": "other-town"}
    response = await client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["active_municipality_id"] == "saint-lazare"


async def test_super_admin_selection_travels_in_header(client: AsyncClient) -> None:
    plain = await client.get("/api/v1/auth/me", headers=_auth("root"))
    assert plain.json()["active_municipality_id"] is None
    selected = await client.get(
        "/api/v1/auth/me", headers={**_auth("root"), "X-Municipality-ID": "saint-lazare"}
    )
    assert selected.json()["active_municipality_id"] == "saint-lazare"


async def test_super_admin_inactive_selection_is_404(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/auth/me", headers={**_auth("root"), "X-Municipality-ID": "hudson"}
    )
    assert response.status_code == 404
    assert response.json()["error"] == "TENANT_NOT_FOUND"


async def test_sign_out_revokes_session(client: AsyncClient, identity) -> None:
    response = await client.post("/api/v1/auth/sign-out", headers=_auth("ed"))
    assert response.status_code == 200
    assert response.json() == {"message": "Signed out."}
    assert identity.signed_out == ["ed"]


async def test_password_reset(client: AsyncClient, identity) -> None:
    response = await client.post(
        "/api/v1/auth/password-reset", json={"email": " ed@saint-lazare.ca "}
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Password reset email sent."}
    assert identity.reset_emails == ["ed@saint-lazare.ca"]


async def test_password_reset_unknown_email(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/password-reset", json={"email": "nobody@saint-lazare.ca"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == msg.NO_ACCOUNT_FOR_EMAIL


async def test_switch_municipality_super_admin(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/switch-municipality",
        json={"municipality_id": "saint-lazare"},
        headers=_auth("root"),
    )
    assert response.status_code == 200
    assert response.json()["active_municipality_id"] == "saint-lazare"


async def test_switch_municipality_refused_for_tenant_admin(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/switch-municipality",
        json={"municipality_id": "saint-lazare"},
        headers=_auth("boss"),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"
