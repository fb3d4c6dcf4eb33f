"""Firestore-backed tenant content store (implements IContentStore).

Every read goes through tenant_collection/tenant_document, so the
municipality id is part of the document path of every query.
Single-field filters run on the server; ordering that would need a
composite index (published pages by menuOrder, road closures by start
date) is applied after the read.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import date
from typing import Any

from civickey.core.tenant_validation import is_valid_municipality_id_format
from civickey.domain.entities.content import alert_is_visible
from civickey.domain.enums import PageStatus
from civickey.domain.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    TenantNotFoundException,
    ValidationException,
)
from civickey.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    DocumentNotFoundError,
    DocumentReference,
    DocumentSnapshot,
    FirestoreRESTClient,
)
from civickey.infrastructure.firebase.collections import (
    COLLECTION_ALERTS,
    COLLECTION_EVENTS,
    COLLECTION_FACILITIES,
    COLLECTION_PAGES,
    COLLECTION_ROAD_CLOSURES,
    COLLECTION_WASTE_ITEMS,
    COLLECTION_ZONES,
    schedule_document,
    tenant_collection,
    tenant_document,
)
from civickey.shared.utils.i18n import localize


async def _collect(snapshots: AsyncIterator[DocumentSnapshot]) -> list[dict[str, Any]]:
    return [{"id": snap.id, **snap.to_dict()} async for snap in snapshots]


def _check_tenant(municipality_id: str) -> None:
    if not is_valid_municipality_id_format(municipality_id):
        raise TenantNotFoundException(municipality_id)


def _name_key(doc: dict[str, Any]) -> str:
    return str(localize(doc.get("name"), "en") or doc.get("id") or "").casefold()


class FirestoreContentStore:
    """municipalities/{id}/{zones,data,events,alerts,...}."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    def _coll(self, municipality_id: str, collection: str):
        _check_tenant(municipality_id)
        return tenant_collection(self._client, municipality_id, collection)

    def _doc(
        self, municipality_id: str, collection: str, doc_id: str
    ) -> DocumentReference | None:
        """Document reference, or None when doc_id is not a valid document id."""
        _check_tenant(municipality_id)
        try:
            return tenant_document(self._client, municipality_id, collection, doc_id)
        except ValueError:
            return None

    async def get_zones(self, municipality_id: str) -> list[dict[str, Any]]:
        zones = await _collect(self._coll(municipality_id, COLLECTION_ZONES).stream())
        return sorted(zones, key=_name_key)

    async def get_schedule(self, municipality_id: str) -> dict[str, Any] | None:
        _check_tenant(municipality_id)
        doc = await schedule_document(self._client, municipality_id).get()
        return doc.to_dict() if doc else None

    async def set_schedule(self, municipality_id: str, data: dict[str, Any]) -> None:
        _check_tenant(municipality_id)
        await schedule_document(self._client, municipality_id).set(data)

    async def get_upcoming_events(
        self, municipality_id: str, today: date, limit: int | None = None
    ) -> list[dict[str, Any]]:
        q = (
            self._coll(municipality_id, COLLECTION_EVENTS)
            .where("date", ">=", today.isoformat())
            .order_by("date")
        )
        if limit:
            q = q.limit(limit)
        return await _collect(q.stream())

    async def get_all_events(self, municipality_id: str) -> list[dict[str, Any]]:
        q = self._coll(municipality_id, COLLECTION_EVENTS).order_by("date")
        return await _collect(q.stream())

    async def get_active_alerts(
        self, municipality_id: str, today: date
    ) -> list[dict[str, Any]]:
        q = self._coll(municipality_id, COLLECTION_ALERTS).where("active", "==", True)
        return [a for a in await _collect(q.stream()) if alert_is_visible(a, today)]

    async def get_facilities(self, municipality_id: str) -> list[dict[str, Any]]:
        facilities = await _collect(self._coll(municipality_id, COLLECTION_FACILITIES).stream())
        return sorted(facilities, key=_name_key)

    async def get_road_closures(self, municipality_id: str) -> list[dict[str, Any]]:
        closures = await _collect(
            self._coll(municipality_id, COLLECTION_ROAD_CLOSURES).stream()
        )
        return sorted(closures, key=lambda c: str(c.get("startDate") or ""))

    async def get_published_pages(self, municipality_id: str) -> list[dict[str, Any]]:
        q = self._coll(municipality_id, COLLECTION_PAGES).where(
            "status", "==", PageStatus.PUBLISHED.value
        )
        pages = await _collect(q.stream())
        return sorted(pages, key=lambda p: p.get("menuOrder") or 0)

    async def get_all_pages(self, municipality_id: str) -> list[dict[str, Any]]:
        pages = await _collect(self._coll(municipality_id, COLLECTION_PAGES).stream())
        return sorted(pages, key=lambda p: p.get("menuOrder") or 0)

    async def get_page_by_slug(
        self, municipality_id: str, slug: str, *, published_only: bool = True
    ) -> dict[str, Any] | None:
        page = await self.get_document(municipality_id, COLLECTION_PAGES, slug)
        if page is None:
            return None
        if published_only and page.get("status") != PageStatus.PUBLISHED.value:
            return None
        return page

    async def get_waste_items(self, municipality_id: str) -> list[dict[str, Any]]:
        return await _collect(self._coll(municipality_id, COLLECTION_WASTE_ITEMS).stream())

    async def list_documents(
        self, municipality_id: str, collection: str, order_by: str | None = None
    ) -> list[dict[str, Any]]:
        coll = self._coll(municipality_id, collection)
        if order_by:
            return await _collect(coll.order_by(order_by).stream())
        return await _collect(coll.stream())

    async def get_document(
        self, municipality_id: str, collection: str, doc_id: str
    ) -> dict[str, Any] | None:
        ref = self._doc(municipality_id, collection, doc_id)
        if ref is None:
            return None
        doc = await ref.get()
        if not doc:
            return None
        return {"id": doc.id, **doc.to_dict()}

    async def create_document(
        self,
        municipality_id: str,
        collection: str,
        data: dict[str, Any],
        doc_id: str | None = None,
    ) -> str:
        coll = self._coll(municipality_id, collection)
        if doc_id is None:
            ref = await coll.add(data)
            return ref.id
        if self._doc(municipality_id, collection, doc_id) is None:
            raise ValidationException(f"Invalid document id: {doc_id!r}", field="id")
        try:
            await coll.create(doc_id, data)
        except DocumentExistsError:
            raise ResourceAlreadyExistsException(collection, doc_id) from None
        return doc_id

    async def update_document(
        self, municipality_id: str, collection: str, doc_id: str, data: dict[str, Any]
    ) -> None:
        ref = self._doc(municipality_id, collection, doc_id)
        if ref is None:
            raise ResourceNotFoundException(collection, doc_id)
        try:
            await ref.update(data)
        except DocumentNotFoundError:
            raise ResourceNotFoundException(collection, doc_id) from None

    async def delete_document(
        self, municipality_id: str, collection: str, doc_id: str
    ) -> None:
        ref = self._doc(municipality_id, collection, doc_id)
        if ref is not None:
            await ref.delete()
