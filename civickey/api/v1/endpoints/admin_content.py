"""Admin content API: tenant-scoped content, zones, schedule, pages, settings and website.

Every route acts on the session's effective municipality (the assignment,
or a super-admin's X-Municipality-ID selection). Permissions are checked
in ContentManagementService.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, Response

from civickey.api.v1.dependencies import AdminSessionDep, ManagementServiceDep
from civickey.core.limiter import limit_writes
from civickey.schemas.content import PageCreateRequest, PublishRequest, ZoneCreateRequest
from civickey.schemas.municipality import CreatedResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# A single free-form JSON object as the request body.
JsonObject = Annotated[dict[str, Any], Body()]


# Content items: events, announcements, facilities, roadClosures, wasteItems


@router.get("/content/{feature}")
async def list_items(
    feature: str, session: AdminSessionDep, svc: ManagementServiceDep
) -> list[dict[str, Any]]:
    return await svc.list_items(session, feature)


@router.get("/content/{feature}/{item_id}")
async def get_item(
    feature: str, item_id: str, session: AdminSessionDep, svc: ManagementServiceDep
) -> dict[str, Any]:
    return await svc.get_item(session, feature, item_id)


@router.post("/content/{feature}", response_model=CreatedResponse, status_code=201)
@limit_writes
async def create_item(
    request: Request,
    feature: str,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
    data: JsonObject,
) -> CreatedResponse:
    return CreatedResponse(id=await svc.create_item(session, feature, data))


@router.patch("/content/{feature}/{item_id}", status_code=204)
@limit_writes
async def update_item(
    request: Request,
    feature: str,
    item_id: str,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
    data: JsonObject,
) -> Response:
    await svc.update_item(session, feature, item_id, data)
    return Response(status_code=204)


@router.delete("/content/{feature}/{item_id}", status_code=204)
@limit_writes
async def delete_item(
    request: Request,
    feature: str,
    item_id: str,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
) -> Response:
    await svc.delete_item(session, feature, item_id)
    return Response(status_code=204)


# Zones and schedule


@router.get("/zones")
async def list_zones(session: AdminSessionDep, svc: ManagementServiceDep) -> list[dict[str, Any]]:
    return await svc.list_zones(session)


@router.post("/zones", response_model=CreatedResponse, status_code=201)
@limit_writes
async def create_zone(
    request: Request,
    body: ZoneCreateRequest,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
) -> CreatedResponse:
    zone_id = await svc.create_zone(session, body.to_data(), zone_id=body.id)
    return CreatedResponse(id=zone_id)


@router.patch("/zones/{zone_id}", status_code=204)
@limit_writes
async def update_zone(
    request: Request,
    zone_id: str,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
    data: JsonObject,
) -> Response:
    await svc.update_zone(session, zone_id, data)
    return Response(status_code=204)


@router.delete("/zones/{zone_id}", status_code=204)
@limit_writes
async def delete_zone(
    request: Request, zone_id: str, session: AdminSessionDep, svc: ManagementServiceDep
) -> Response:
    """Delete a zone and its entry in the collection schedule."""
    await svc.delete_zone(session, zone_id)
    return Response(status_code=204)


@router.get("/schedule")
async def get_schedule(session: AdminSessionDep, svc: ManagementServiceDep) -> dict[str, Any]:
    """Schedule document plus the ids of schedule entries whose zone no longer exists."""
    return await svc.get_schedule(session)


@router.put("/schedule", status_code=204)
@limit_writes
async def update_schedule(
    request: Request,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
    data: JsonObject,
) -> Response:
    await svc.update_schedule(session, data)
    return Response(status_code=204)


# Pages


@router.get("/pages")
async def list_pages(session: AdminSessionDep, svc: ManagementServiceDep) -> list[dict[str, Any]]:
    return await svc.list_pages(session)


@router.get("/pages/{slug}")
async def get_page(
    slug: str, session: AdminSessionDep, svc: ManagementServiceDep
) -> dict[str, Any]:
    return await svc.get_page(session, slug)


@router.post("/pages", response_model=CreatedResponse, status_code=201)
@limit_writes
async def create_page(
    request: Request,
    body: PageCreateRequest,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
) -> CreatedResponse:
    """Create a page; the normalized slug is returned as its id."""
    return CreatedResponse(id=await svc.create_page(session, body.to_data()))


@router.patch("/pages/{slug}", status_code=204)
@limit_writes
async def update_page(
    request: Request,
    slug: str,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
    data: JsonObject,
) -> Response:
    await svc.update_page(session, slug, data)
    return Response(status_code=204)


@router.post("/pages/{slug}/publish", status_code=204)
@limit_writes
async def publish_page(
    request: Request,
    slug: str,
    body: PublishRequest,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
) -> Response:
    await svc.set_page_published(session, slug, body.published)
    return Response(status_code=204)


@router.delete("/pages/{slug}", status_code=204)
@limit_writes
async def delete_page(
    request: Request, slug: str, session: AdminSessionDep, svc: ManagementServiceDep
) -> Response:
    await svc.delete_page(session, slug)
    return Response(status_code=204)


# Municipality settings and website


@router.get("/settings")
async def get_settings(session: AdminSessionDep, svc: ManagementServiceDep) -> dict[str, Any]:
    return await svc.get_settings(session)


@router.patch("/settings", status_code=204)
@limit_writes
async def update_settings(
    request: Request,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
    data: JsonObject,
) -> Response:
    await svc.update_settings(session, data)
    return Response(status_code=204)


@router.get("/website")
async def get_website(session: AdminSessionDep, svc: ManagementServiceDep) -> dict[str, Any]:
    return await svc.get_website(session)


@router.patch("/website")
@limit_writes
async def update_website(
    request: Request,
    session: AdminSessionDep,
    svc: ManagementServiceDep,
    data: JsonObject,
) -> dict[str, Any]:
    """Merge website settings. Changing customDomain re-registers it with the host."""
    return await svc.update_website(session, data)
