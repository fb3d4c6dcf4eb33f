"""Super-admin API: municipality lifecycle and admin accounts.

Municipalities are deactivated, never deleted. Admin accounts are
soft-deactivated; deactivation also revokes the admin's sessions.
"""

from typing import Any

from fastapi import APIRouter, Query, Request, Response

from civickey.api.v1.dependencies import MunicipalityAdminDep, SuperAdminDep
from civickey.core.limiter import limit_writes
from civickey.schemas.admin import AdminCreateRequest, AdminUpdateRequest
from civickey.schemas.municipality import (
    ActiveUpdate,
    CreatedResponse,
    MunicipalityCreateRequest,
)

router = APIRouter()


@router.get("/municipalities")
async def list_municipalities(
    session: SuperAdminDep, svc: MunicipalityAdminDep
) -> list[dict[str, Any]]:
    """All municipalities, active or not."""
    return await svc.list_municipalities(session)


@router.post("/municipalities", response_model=CreatedResponse, status_code=201)
@limit_writes
async def create_municipality(
    request: Request,
    body: MunicipalityCreateRequest,
    session: SuperAdminDep,
    svc: MunicipalityAdminDep,
) -> CreatedResponse:
    """Create a municipality seeded with default colors and collection schedule (409 if the id exists)."""
    municipality_id = await svc.create_municipality(session, body.id, body.to_data())
    return CreatedResponse(id=municipality_id)


@router.put("/municipalities/{municipality_id}/active", status_code=204)
@limit_writes
async def set_municipality_active(
    request: Request,
    municipality_id: str,
    body: ActiveUpdate,
    session: SuperAdminDep,
    svc: MunicipalityAdminDep,
) -> Response:
    await svc.set_municipality_active(session, municipality_id, body.active)
    return Response(status_code=204)


@router.get("/admins")
async def list_admins(
    session: SuperAdminDep,
    svc: MunicipalityAdminDep,
    municipality_id: str | None = Query(default=None, max_length=64),
) -> list[dict[str, Any]]:
    return await svc.list_admins(session, municipality_id)


@router.get("/admins/{uid}")
async def get_admin(uid: str, session: SuperAdminDep, svc: MunicipalityAdminDep) -> dict[str, Any]:
    return await svc.get_admin(session, uid)


@router.post("/admins", response_model=CreatedResponse, status_code=201)
@limit_writes
async def create_admin(
    request: Request,
    body: AdminCreateRequest,
    session: SuperAdminDep,
    svc: MunicipalityAdminDep,
) -> CreatedResponse:
    """Create the identity account and admin record; a password reset email is sent."""
    uid = await svc.create_admin(
        session,
        email=body.email,
        name=body.name,
        municipality_id=body.municipality_id,
        role=body.role,
    )
    return CreatedResponse(id=uid)


@router.patch("/admins/{uid}", status_code=204)
@limit_writes
async def update_admin(
    request: Request,
    uid: str,
    body: AdminUpdateRequest,
    session: SuperAdminDep,
    svc: MunicipalityAdminDep,
) -> Response:
    await svc.update_admin(session, uid, body.to_data())
    return Response(status_code=204)


@router.put("/admins/{uid}/active", status_code=204)
@limit_writes
async def set_admin_active(
    request: Request,
    uid: str,
    body: ActiveUpdate,
    session: SuperAdminDep,
    svc: MunicipalityAdminDep,
) -> Response:
    await svc.set_admin_active(session, uid, body.active)
    return Response(status_code=204)


@router.post("/admins/{uid}/password-reset", status_code=204)
@limit_writes
async def send_password_reset(
    request: Request, uid: str, session: SuperAdminDep, svc: MunicipalityAdminDep
) -> Response:
    await svc.send_password_reset(session, uid)
    return Response(status_code=204)
