"""Firestore-backed tenant directory (implements IMunicipalityDirectory)."""

from __future__ import annotations

from typing import Any

from civickey.core.tenant_validation import is_valid_municipality_id_format
from civickey.domain.exceptions import (
    ResourceAlreadyExistsException,
    TenantNotFoundException,
)
from civickey.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    DocumentNotFoundError,
    FirestoreRESTClient,
)
from civickey.infrastructure.firebase.collections import (
    COLLECTION_MUNICIPALITIES,
    municipality_document,
)


class FirestoreMunicipalityDirectory:
    """Top-level municipalities collection; document id is the municipality id."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_MUNICIPALITIES)

    async def get_config(self, municipality_id: str) -> dict[str, Any] | None:
        """Return the municipality document with its id, or None."""
        if not is_valid_municipality_id_format(municipality_id):
            return None
        doc = await municipality_document(self._client, municipality_id).get()
        if not doc:
            return None
        return {"id": doc.id, **doc.to_dict()}

    async def list_active(self) -> list[dict[str, Any]]:
        q = self._coll.where("active", "==", True)
        return [{"id": snap.id, **snap.to_dict()} async for snap in q.stream()]

    async def list_all(self) -> list[dict[str, Any]]:
        return [{"id": snap.id, **snap.to_dict()} async for snap in self._coll.stream()]

    async def find_by_custom_domain(self, hostname: str) -> str | None:
        """Return the id of the municipality whose website.customDomain equals hostname."""
        q = self._coll.where("website.customDomain", "==", hostname).limit(1)
        async for snap in q.stream():
            return snap.id
        return None

    async def create(self, municipality_id: str, data: dict[str, Any]) -> None:
        """Create with explicit id (atomic; fails if the id is taken)."""
        if not is_valid_municipality_id_format(municipality_id):
            raise TenantNotFoundException(municipality_id)
        try:
            await self._coll.create(municipality_id, data)
        except DocumentExistsError:
            raise ResourceAlreadyExistsException("Municipality", municipality_id) from None

    async def update(self, municipality_id: str, data: dict[str, Any]) -> None:
        if not is_valid_municipality_id_format(municipality_id):
            raise TenantNotFoundException(municipality_id)
        try:
            await municipality_document(self._client, municipality_id).update(data)
        except DocumentNotFoundError:
            raise TenantNotFoundException(municipality_id) from None
