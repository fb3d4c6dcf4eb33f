"""Admin console use cases for one municipality's content.

Every operation takes the caller's AdminSession, checks the permission
table first and then works on session.effective_municipality only.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime
from typing import Any

from civickey.application.interfaces.repositories import IContentStore, IMunicipalityDirectory
from civickey.application.interfaces.services import ICacheService, IDomainRegistrar
from civickey.application.services.authorization_service import AuthorizationService
from civickey.application.services.domain_resolver import DomainResolver, normalize_hostname
from civickey.application.services.page_content_validator import PageContentValidator
from civickey.application.use_cases.municipality_content import invalidate_municipality
from civickey.core.constants import CONTENT_COLLECTIONS
from civickey.domain.entities.admin import AdminSession
from civickey.domain.entities.page import PageEntity
from civickey.domain.entities.schedule import ScheduleEntity
from civickey.domain.entities.waste_item import build_search_terms
from civickey.domain.enums import PageStatus
from civickey.domain.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    TenantNotFoundException,
    ValidationException,
)
from civickey.shared.utils.datetime import utc_now
from civickey.shared.utils.i18n import localize

logger = logging.getLogger(__name__)

COLLECTION_ZONES = "zones"
COLLECTION_PAGES = "pages"

SETTINGS_FIELDS = frozenset({"name", "nameEn", "nameFr", "colors", "contact", "logo"})
WEBSITE_FIELDS = frozenset(
    {"enabled", "heroTagline", "heroImage", "navigation", "footer", "customDomain"}
)
# Fields the server owns; stripped from client payloads.
_SERVER_FIELDS = frozenset({"id", "createdAt", "updatedAt"})

_HOSTNAME_RE = re.compile(
    r"^(?=.{1,253}$)([a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$"
)


def normalize_custom_domain(value: Any) -> str | None:
    """Trimmed, lower-cased hostname, or None to clear. Raises ValidationException."""
    if value is None:
        return None
    domain = normalize_hostname(str(value))
    if not domain:
        return None
    if not _HOSTNAME_RE.match(domain):
        raise ValidationException(f"Invalid domain: {value!r}", field="customDomain")
    return domain


def _client_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in _SERVER_FIELDS}


def with_search_terms(item: dict[str, Any]) -> dict[str, Any]:
    """Waste item with searchTerms derived from its names and aliases."""
    name_fr = item.get("nameFr") or localize(item.get("name"), "fr")
    name_en = item.get("nameEn") or localize(item.get("name"), "en")
    if not isinstance(name_fr, str) or not isinstance(name_en, str):
        raise ValidationException("Waste item names must be text", field="name")
    if not name_fr.strip() and not name_en.strip():
        raise ValidationException("Waste item name is required", field="name")
    aliases = item.get("aliases")
    if isinstance(aliases, list):
        aliases = ", ".join(str(a) for a in aliases)
    out = dict(item)
    out["searchTerms"] = build_search_terms(name_fr, name_en, aliases)
    return out


class ContentManagementService:
    """RBAC-guarded create/edit/delete of tenant content."""

    def __init__(
        self,
        content: IContentStore,
        directory: IMunicipalityDirectory,
        cache: ICacheService,
        *,
        authz: AuthorizationService | None = None,
        page_validator: PageContentValidator | None = None,
        registrar: IDomainRegistrar | None = None,
        resolver: DomainResolver | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.content = content
        self.directory = directory
        self.cache = cache
        self.authz = authz or AuthorizationService()
        self.page_validator = page_validator or PageContentValidator()
        self.registrar = registrar
        self.resolver = resolver
        self._clock = clock

    def _scope(self, session: AdminSession, feature: str, action: str) -> str:
        """Check permission and return the municipality the session acts on."""
        self.authz.require_permission(session.role, feature, action)
        municipality_id = session.effective_municipality
        if not municipality_id:
            raise ValidationException("No municipality selected", field="municipalityId")
        return municipality_id

    @staticmethod
    def _collection(feature: str) -> str:
        try:
            return CONTENT_COLLECTIONS[feature]
        except KeyError:
            raise ResourceNotFoundException("Content type", feature) from None

    # Events, announcements, facilities, road closures, waste items

    async def list_items(self, session: AdminSession, feature: str) -> list[dict[str, Any]]:
        collection = self._collection(feature)
        municipality_id = self._scope(session, feature, "view")
        if feature == "events":
            return await self.content.get_all_events(municipality_id)
        if feature == "roadClosures":
            return await self.content.get_road_closures(municipality_id)
        return await self.content.list_documents(municipality_id, collection)

    async def get_item(
        self, session: AdminSession, feature: str, item_id: str
    ) -> dict[str, Any]:
        collection = self._collection(feature)
        municipality_id = self._scope(session, feature, "view")
        doc = await self.content.get_document(municipality_id, collection, item_id)
        if doc is None:
            raise ResourceNotFoundException(feature, item_id)
        return doc

    async def create_item(
        self, session: AdminSession, feature: str, data: dict[str, Any]
    ) -> str:
        collection = self._collection(feature)
        municipality_id = self._scope(session, feature, "create")
        doc = _client_fields(data)
        if feature == "wasteItems":
            doc = with_search_terms(doc)
        now = self._clock()
        doc["createdAt"] = now
        doc["updatedAt"] = now
        item_id = await self.content.create_document(municipality_id, collection, doc)
        logger.info("Created %s/%s in %s", collection, item_id, municipality_id)
        return item_id

    async def update_item(
        self, session: AdminSession, feature: str, item_id: str, data: dict[str, Any]
    ) -> None:
        collection = self._collection(feature)
        municipality_id = self._scope(session, feature, "edit")
        doc = _client_fields(data)
        if feature == "wasteItems":
            current = await self.content.get_document(municipality_id, collection, item_id)
            if current is None:
                raise ResourceNotFoundException(feature, item_id)
            doc = with_search_terms({**_client_fields(current), **doc})
        doc["updatedAt"] = self._clock()
        await self.content.update_document(municipality_id, collection, item_id, doc)

    async def delete_item(self, session: AdminSession, feature: str, item_id: str) -> None:
        collection = self._collection(feature)
        municipality_id = self._scope(session, feature, "delete")
        await self.content.delete_document(municipality_id, collection, item_id)
        logger.info("Deleted %s/%s in %s", collection, item_id, municipality_id)

    # Zones

    async def list_zones(self, session: AdminSession) -> list[dict[str, Any]]:
        return await self.content.get_zones(self._scope(session, "zones", "view"))

    async def create_zone(
        self, session: AdminSession, data: dict[str, Any], zone_id: str | None = None
    ) -> str:
        municipality_id = self._scope(session, "zones", "create")
        doc = _client_fields(data)
        if not doc.get("name"):
            raise ValidationException("Zone name is required", field="name")
        now = self._clock()
        doc["createdAt"] = now
        doc["updatedAt"] = now
        return await self.content.create_document(
            municipality_id, COLLECTION_ZONES, doc, doc_id=zone_id
        )

    async def update_zone(
        self, session: AdminSession, zone_id: str, data: dict[str, Any]
    ) -> None:
        municipality_id = self._scope(session, "zones", "edit")
        doc = _client_fields(data)
        doc["updatedAt"] = self._clock()
        await self.content.update_document(municipality_id, COLLECTION_ZONES, zone_id, doc)

    async def delete_zone(self, session: AdminSession, zone_id: str) -> None:
        """Delete a zone and its entry in the schedule."""
        municipality_id = self._scope(session, "zones", "delete")
        await self.content.delete_document(municipality_id, COLLECTION_ZONES, zone_id)
        raw = await self.content.get_schedule(municipality_id)
        if raw is None:
            return
        schedule = ScheduleEntity.from_document(raw)
        if zone_id in schedule.schedules:
            doc = schedule.without_zone(zone_id).to_document()
            doc["updatedAt"] = self._clock()
            await self.content.set_schedule(municipality_id, doc)
            logger.info("Removed schedule entry for deleted zone %s/%s", municipality_id, zone_id)

    # Schedule

    async def get_schedule(self, session: AdminSession) -> dict[str, Any]:
        """Stored schedule plus the zone keys that no longer match a zone."""
        municipality_id = self._scope(session, "schedule", "view")
        raw = await self.content.get_schedule(municipality_id)
        zones = await self.content.get_zones(municipality_id)
        schedule = ScheduleEntity.from_document(raw)
        orphans = schedule.orphaned_zone_ids({z["id"] for z in zones if z.get("id")})
        if orphans:
            logger.warning(
                "Schedule for %s references missing zones: %s",
                municipality_id,
                ", ".join(sorted(orphans)),
            )
        return {"schedule": raw or {}, "orphanedZones": sorted(orphans)}

    async def update_schedule(self, session: AdminSession, data: dict[str, Any]) -> None:
        """Merge collectionTypes/schedules/guidelines/specialCollections into the schedule.

        Every zone key in schedules must be an existing zone.
        """
        municipality_id = self._scope(session, "schedule", "edit")
        current = await self.content.get_schedule(municipality_id) or {}
        merged = {**current, **_client_fields(data)}
        schedule = ScheduleEntity.from_document(merged)
        zones = await self.content.get_zones(municipality_id)
        schedule.validate({z["id"] for z in zones if z.get("id")})
        merged["updatedAt"] = self._clock()
        await self.content.set_schedule(municipality_id, merged)

    # Pages

    async def list_pages(self, session: AdminSession) -> list[dict[str, Any]]:
        return await self.content.get_all_pages(self._scope(session, "pages", "view"))

    async def get_page(self, session: AdminSession, slug: str) -> dict[str, Any]:
        municipality_id = self._scope(session, "pages", "view")
        page = await self.content.get_page_by_slug(municipality_id, slug, published_only=False)
        if page is None:
            raise ResourceNotFoundException("Page", slug)
        return page

    async def create_page(self, session: AdminSession, data: dict[str, Any]) -> str:
        municipality_id = self._scope(session, "pages", "create")
        page = PageEntity.create(
            data.get("slug") or "",
            data.get("type") or "",
            data.get("title"),
            content=data.get("content") or {},
            status=data.get("status") or PageStatus.DRAFT.value,
            menu_order=int(data.get("menuOrder") or 0),
            show_in_menu=data.get("showInMenu", True) is not False,
        )
        if page.is_published:
            self.authz.require_permission(session.role, "pages", "publish")
        self.page_validator.validate(page.page_type, page.content)
        doc = page.to_document()
        now = self._clock()
        doc["createdAt"] = now
        doc["updatedAt"] = now
        try:
            await self.content.create_document(
                municipality_id, COLLECTION_PAGES, doc, doc_id=page.slug
            )
        except ResourceAlreadyExistsException:
            raise ValidationException(
                f"A page with URL slug '{page.slug}' already exists", field="slug"
            ) from None
        return page.slug

    async def update_page(
        self, session: AdminSession, slug: str, data: dict[str, Any]
    ) -> None:
        """Update title/content/menu fields. The slug (document id) never changes."""
        municipality_id = self._scope(session, "pages", "edit")
        current = await self.content.get_page_by_slug(municipality_id, slug, published_only=False)
        if current is None:
            raise ResourceNotFoundException("Page", slug)
        merged = {**current, **_client_fields(data)}
        page = PageEntity.create(
            slug,
            merged.get("type") or "",
            merged.get("title"),
            content=merged.get("content") or {},
            status=merged.get("status") or PageStatus.DRAFT.value,
            menu_order=int(merged.get("menuOrder") or 0),
            show_in_menu=merged.get("showInMenu", True) is not False,
        )
        if page.status.value != current.get("status"):
            self.authz.require_permission(session.role, "pages", "publish")
        self.page_validator.validate(page.page_type, page.content)
        doc = page.to_document()
        doc["updatedAt"] = self._clock()
        await self.content.update_document(municipality_id, COLLECTION_PAGES, slug, doc)

    async def set_page_published(
        self, session: AdminSession, slug: str, published: bool
    ) -> None:
        municipality_id = self._scope(session, "pages", "publish")
        status = PageStatus.PUBLISHED if published else PageStatus.DRAFT
        await self.content.update_document(
            municipality_id,
            COLLECTION_PAGES,
            slug,
            {"status": status.value, "updatedAt": self._clock()},
        )

    async def delete_page(self, session: AdminSession, slug: str) -> None:
        municipality_id = self._scope(session, "pages", "delete")
        await self.content.delete_document(municipality_id, COLLECTION_PAGES, slug)

    # Municipality settings and website

    async def _require_config(self, municipality_id: str) -> dict[str, Any]:
        config = await self.directory.get_config(municipality_id)
        if config is None:
            raise TenantNotFoundException(municipality_id)
        return config

    async def get_settings(self, session: AdminSession) -> dict[str, Any]:
        municipality_id = self._scope(session, "municipalitySettings", "view")
        return await self._require_config(municipality_id)

    async def update_settings(self, session: AdminSession, data: dict[str, Any]) -> None:
        """Update display names, colors, contact and logo."""
        municipality_id = self._scope(session, "municipalitySettings", "edit")
        unknown = set(data) - SETTINGS_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be changed here: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        await self._require_config(municipality_id)
        doc = dict(data)
        doc["updatedAt"] = self._clock()
        await self.directory.update(municipality_id, doc)
        await invalidate_municipality(self.cache, municipality_id)

    async def get_website(self, session: AdminSession) -> dict[str, Any]:
        municipality_id = self._scope(session, "website", "view")
        config = await self._require_config(municipality_id)
        return config.get("website") or {}

    async def update_website(self, session: AdminSession, data: dict[str, Any]) -> dict[str, Any]:
        """Merge website settings; a custom domain change is pushed to the registrar.

        Registrar failures are logged and do not undo the settings write.
        """
        municipality_id = self._scope(session, "website", "edit")
        unknown = set(data) - WEBSITE_FIELDS
        if unknown:
            raise ValidationException(
                f"Unknown website settings: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        config = await self._require_config(municipality_id)
        current = dict(config.get("website") or {})
        website = {**current, **data}
        old_domain = current.get("customDomain") or None
        new_domain = old_domain
        if "customDomain" in data:
            new_domain = normalize_custom_domain(data["customDomain"])
            website["customDomain"] = new_domain
        domain_changed = new_domain != old_domain
        if domain_changed:
            website["domainVerified"] = False
            if new_domain:
                taken_by = await self.directory.find_by_custom_domain(new_domain)
                if taken_by and taken_by != municipality_id:
                    raise ValidationException(
                        f"Domain {new_domain} is already used by another municipality",
                        field="customDomain",
                    )
        await self.directory.update(
            municipality_id, {"website": website, "updatedAt": self._clock()}
        )
        await invalidate_municipality(self.cache, municipality_id)
        if domain_changed:
            await self._move_domain(municipality_id, old_domain, new_domain)
        return website

    async def _move_domain(
        self, municipality_id: str, old_domain: str | None, new_domain: str | None
    ) -> None:
        if self.registrar is not None:
            if old_domain:
                try:
                    await self.registrar.remove_domain(old_domain)
                except Exception:
                    logger.exception(
                        "Failed to remove domain %s for %s", old_domain, municipality_id
                    )
            if new_domain:
                try:
                    await self.registrar.add_domain(new_domain)
                except Exception:
                    logger.exception(
                        "Failed to add domain %s for %s", new_domain, municipality_id
                    )
        elif new_domain:
            logger.warning("No domain registrar configured; %s not registered", new_domain)
        if self.resolver is not None:
            await self.resolver.evict(old_domain)
            await self.resolver.evict(new_domain)
