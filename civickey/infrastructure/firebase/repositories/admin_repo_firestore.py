"""Firestore-backed admin accounts (implements IAdminRepository)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from civickey.domain.entities.admin import AdminAccount
from civickey.domain.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from civickey.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    DocumentNotFoundError,
    FirestoreRESTClient,
)
from civickey.infrastructure.firebase.collections import COLLECTION_ADMINS

logger = logging.getLogger(__name__)


class FirestoreAdminRepository:
    """admins/{uid}; the uid comes from the identity provider."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_ADMINS)

    def _doc(self, uid: str):
        if not uid or "/" in uid:
            raise ResourceNotFoundException("Admin", uid or "")
        return self._coll.document(uid)

    async def get_document(self, uid: str) -> dict[str, Any] | None:
        doc = await self._doc(uid).get()
        if not doc:
            return None
        return {"id": doc.id, **doc.to_dict()}

    async def get(self, uid: str) -> AdminAccount | None:
        """Return the admin, or None when missing or malformed."""
        data = await self.get_document(uid)
        if data is None:
            return None
        try:
            return AdminAccount.from_document(uid, data)
        except ValidationException:
            logger.warning("Malformed admin record: uid=%s", uid)
            return None

    async def list(self, municipality_id: str | None = None) -> list[dict[str, Any]]:
        if municipality_id:
            q = self._coll.where("municipalityId", "==", municipality_id)
            return [{"id": snap.id, **snap.to_dict()} async for snap in q.stream()]
        return [{"id": snap.id, **snap.to_dict()} async for snap in self._coll.stream()]

    async def create(self, uid: str, data: dict[str, Any]) -> None:
        try:
            await self._coll.create(uid, data)
        except DocumentExistsError:
            raise ResourceAlreadyExistsException("Admin", uid) from None

    async def update(self, uid: str, data: dict[str, Any]) -> None:
        try:
            await self._doc(uid).update(data)
        except DocumentNotFoundError:
            raise ResourceNotFoundException("Admin", uid) from None

    async def touch_last_login(self, uid: str, when: datetime) -> None:
        await self.update(uid, {"lastLogin": when})
