"""Public read API: municipality list and per-municipality content.

No authentication. Every per-municipality route checks that the
municipality exists and is active before reading its content.
"""

from typing import Any

from fastapi import APIRouter, Query

from civickey.api.v1.dependencies import ActiveMunicipalityDep, ContentServiceDep

router = APIRouter()


@router.get("")
async def list_municipalities(content: ContentServiceDep) -> list[dict[str, Any]]:
    """Active municipalities for the selection screen, sorted by English name."""
    return await content.list_active_municipalities()


@router.get("/{municipality_id}")
async def get_municipality(
    municipality_id: ActiveMunicipalityDep, content: ContentServiceDep
) -> dict[str, Any]:
    return await content.require_active_config(municipality_id)


@router.get("/{municipality_id}/snapshot")
async def get_snapshot(
    municipality_id: ActiveMunicipalityDep, content: ContentServiceDep
) -> dict[str, Any]:
    """Everything the app's first screen needs, read concurrently.

    Sections that failed to load are empty and named in "errors".
    """
    snapshot = await content.fetch_all(municipality_id)
    return snapshot.to_dict()


@router.get("/{municipality_id}/zones")
async def list_zones(
    municipality_id: ActiveMunicipalityDep, content: ContentServiceDep
) -> list[dict[str, Any]]:
    return await content.get_zones(municipality_id)


@router.get("/{municipality_id}/schedule")
async def get_schedule(
    municipality_id: ActiveMunicipalityDep, content: ContentServiceDep
) -> dict[str, Any]:
    schedule = await content.get_schedule(municipality_id)
    return schedule.to_document()


@router.get("/{municipality_id}/zones/{zone_id}/schedule")
async def get_zone_schedule(
    municipality_id: ActiveMunicipalityDep, zone_id: str, content: ContentServiceDep
) -> dict[str, Any]:
    """Collection entries for one zone only; unknown zone is a 404."""
    return await content.get_zone_schedule(municipality_id, zone_id)


@router.get("/{municipality_id}/special-collections")
async def list_special_collections(
    municipality_id: ActiveMunicipalityDep,
    content: ContentServiceDep,
    zone_id: str | None = Query(default=None, max_length=128),
) -> list[dict[str, Any]]:
    return await content.get_upcoming_special_collections(municipality_id, zone_id)


@router.get("/{municipality_id}/events")
async def list_events(
    municipality_id: ActiveMunicipalityDep,
    content: ContentServiceDep,
    limit: int | None = Query(default=None, ge=1, le=100),
) -> list[dict[str, Any]]:
    """Events dated today or later, soonest first."""
    return await content.get_upcoming_events(municipality_id, limit)


@router.get("/{municipality_id}/events/{event_id}")
async def get_event(
    municipality_id: ActiveMunicipalityDep, event_id: str, content: ContentServiceDep
) -> dict[str, Any]:
    return await content.get_event(municipality_id, event_id)


@router.get("/{municipality_id}/alerts")
async def list_alerts(
    municipality_id: ActiveMunicipalityDep, content: ContentServiceDep
) -> list[dict[str, Any]]:
    """Active alerts that have not expired."""
    return await content.get_active_alerts(municipality_id)


@router.get("/{municipality_id}/facilities")
async def list_facilities(
    municipality_id: ActiveMunicipalityDep, content: ContentServiceDep
) -> list[dict[str, Any]]:
    return await content.get_facilities(municipality_id)


@router.get("/{municipality_id}/facilities/{facility_id}")
async def get_facility(
    municipality_id: ActiveMunicipalityDep, facility_id: str, content: ContentServiceDep
) -> dict[str, Any]:
    return await content.get_facility(municipality_id, facility_id)


@router.get("/{municipality_id}/road-closures")
async def list_road_closures(
    municipality_id: ActiveMunicipalityDep, content: ContentServiceDep
) -> list[dict[str, Any]]:
    return await content.get_road_closures(municipality_id)


@router.get("/{municipality_id}/pages")
async def list_pages(
    municipality_id: ActiveMunicipalityDep, content: ContentServiceDep
) -> list[dict[str, Any]]:
    """Published pages ordered by menu position."""
    return await content.get_published_pages(municipality_id)


@router.get("/{municipality_id}/pages/{slug}")
async def get_page(
    municipality_id: ActiveMunicipalityDep, slug: str, content: ContentServiceDep
) -> dict[str, Any]:
    return await content.get_page(municipality_id, slug)


@router.get("/{municipality_id}/waste-items")
async def list_waste_items(
    municipality_id: ActiveMunicipalityDep, content: ContentServiceDep
) -> list[dict[str, Any]]:
    return await content.get_waste_items(municipality_id)


@router.get("/{municipality_id}/waste-items/search")
async def search_waste_items(
    municipality_id: ActiveMunicipalityDep,
    content: ContentServiceDep,
    q: str | None = Query(default=None, max_length=100),
) -> list[dict[str, Any]]:
    """Prefix matches first, then substring matches; fewer than 2 characters returns []."""
    return await content.search_waste_items(municipality_id, q)
