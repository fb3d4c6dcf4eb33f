"""Public website data routes: /{municipality_id}/{locale}/...

Requests reach these paths directly on development hosts, or through
DomainRoutingMiddleware, which rewrites subdomain and custom-domain
requests. Bilingual fields are resolved to the requested locale.
"""

import asyncio
from typing import Any

from fastapi import APIRouter

from civickey.api.v1.dependencies import ContentServiceDep
from civickey.application.use_cases.municipality_content import MunicipalityContentService
from civickey.core.constants import SUPPORTED_LOCALES
from civickey.core.tenant_validation import is_valid_municipality_id_format
from civickey.domain.exceptions import ResourceNotFoundException, TenantNotFoundException
from civickey.shared.utils.i18n import localize, localize_fields

router = APIRouter()

_TEXT_FIELDS = ("title", "name", "description", "message", "location", "body", "address")
HOME_EVENTS = 3


def _localized(items: list[dict[str, Any]], locale: str) -> list[dict[str, Any]]:
    return [localize_fields(item, locale, _TEXT_FIELDS) for item in items]


def _menu(pages: list[dict[str, Any]], locale: str) -> list[dict[str, Any]]:
    return [
        {"slug": p.get("slug") or p.get("id"), "title": localize(p.get("title"), locale)}
        for p in pages
        if p.get("showInMenu") is not False
    ]


async def _site_config(
    municipality_id: str, locale: str, content: MunicipalityContentService
) -> dict[str, Any]:
    if locale not in SUPPORTED_LOCALES:
        raise ResourceNotFoundException("Locale", locale)
    if not is_valid_municipality_id_format(municipality_id):
        raise TenantNotFoundException(municipality_id)
    return await content.require_active_config(municipality_id)


@router.get("/{municipality_id}/{locale}")
async def home(
    municipality_id: str, locale: str, content: ContentServiceDep
) -> dict[str, Any]:
    """Home page: header/footer data, active alerts, next events and collection types."""
    config = await _site_config(municipality_id, locale, content)
    snapshot, pages = await asyncio.gather(
        content.fetch_all(municipality_id),
        content.get_published_pages(municipality_id),
    )
    schedule = snapshot.schedule or {}
    return {
        "municipalityId": municipality_id,
        "locale": locale,
        "name": localize(config.get("name"), locale),
        "colors": config.get("colors") or {},
        "logo": config.get("logo"),
        "website": config.get("website") or {},
        "menu": _menu(pages, locale),
        "alerts": _localized(snapshot.alerts, locale),
        "events": _localized(snapshot.events[:HOME_EVENTS], locale),
        "zones": _localized(snapshot.zones, locale),
        "collectionTypes": _localized(schedule.get("collectionTypes") or [], locale),
    }


@router.get("/{municipality_id}/{locale}/collections")
async def collections(
    municipality_id: str, locale: str, content: ContentServiceDep
) -> dict[str, Any]:
    await _site_config(municipality_id, locale, content)
    zones, schedule, special = await asyncio.gather(
        content.get_zones(municipality_id),
        content.get_schedule(municipality_id),
        content.get_upcoming_special_collections(municipality_id),
    )
    return {
        "zones": _localized(zones, locale),
        "collectionTypes": _localized(schedule.collection_types, locale),
        "schedules": schedule.schedules,
        "guidelines": schedule.guidelines,
        "specialCollections": _localized(special, locale),
    }


@router.get("/{municipality_id}/{locale}/events")
async def events(
    municipality_id: str, locale: str, content: ContentServiceDep
) -> list[dict[str, Any]]:
    await _site_config(municipality_id, locale, content)
    return _localized(await content.get_upcoming_events(municipality_id), locale)


@router.get("/{municipality_id}/{locale}/events/{event_id}")
async def event_detail(
    municipality_id: str,
    event_id: str,
    content: ContentServiceDep,
    locale: str,
) -> dict[str, Any]:
    await _site_config(municipality_id, locale, content)
    event = await content.get_event(municipality_id, event_id)
    return localize_fields(event, locale, _TEXT_FIELDS)


@router.get("/{municipality_id}/{locale}/news")
async def news(
    municipality_id: str, locale: str, content: ContentServiceDep
) -> list[dict[str, Any]]:
    await _site_config(municipality_id, locale, content)
    return _localized(await content.get_active_alerts(municipality_id), locale)


@router.get("/{municipality_id}/{locale}/facilities")
async def facilities(
    municipality_id: str, locale: str, content: ContentServiceDep
) -> list[dict[str, Any]]:
    await _site_config(municipality_id, locale, content)
    return _localized(await content.get_facilities(municipality_id), locale)


@router.get("/{municipality_id}/{locale}/facilities/{facility_id}")
async def facility_detail(
    municipality_id: str,
    facility_id: str,
    content: ContentServiceDep,
    locale: str,
) -> dict[str, Any]:
    await _site_config(municipality_id, locale, content)
    facility = await content.get_facility(municipality_id, facility_id)
    return localize_fields(facility, locale, _TEXT_FIELDS)


@router.get("/{municipality_id}/{locale}/{page_slug}")
async def custom_page(
    municipality_id: str,
    page_slug: str,
    content: ContentServiceDep,
    locale: str,
) -> dict[str, Any]:
    """A published custom page; drafts are 404."""
    await _site_config(municipality_id, locale, content)
    page = await content.get_page(municipality_id, page_slug)
    return localize_fields(page, locale, ("title",))
