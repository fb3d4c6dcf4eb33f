"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Every tenant-scoped method takes the municipality id first; implementations
put it in the document path, so there is no cross-tenant read.
Documents are plain dicts carrying their document id under "id".
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from civickey.domain.entities.admin import AdminAccount


class IMunicipalityDirectory(Protocol):
    """Protocol for the tenant directory (top-level municipalities collection)."""

    async def get_config(self, municipality_id: str) -> dict[str, Any] | None:
        """Return the municipality document, or None."""

    async def list_active(self) -> list[dict[str, Any]]:
        """Return active municipalities (unsorted)."""

    async def list_all(self) -> list[dict[str, Any]]:
        """Return every municipality including inactive ones."""

    async def find_by_custom_domain(self, hostname: str) -> str | None:
        """Return the id of the municipality whose website.customDomain equals hostname."""

    async def create(self, municipality_id: str, data: dict[str, Any]) -> None:
        """Create with explicit id; raise ResourceAlreadyExistsException if taken."""

    async def update(self, municipality_id: str, data: dict[str, Any]) -> None:
        """Update the given top-level fields; raise TenantNotFoundException if missing."""


class IContentStore(Protocol):
    """Protocol for tenant-scoped content (zones, schedule, events, alerts, ...)."""

    async def get_zones(self, municipality_id: str) -> list[dict[str, Any]]:
        """Return zones ordered by name."""

    async def get_schedule(self, municipality_id: str) -> dict[str, Any] | None:
        """Return data/schedule, or None."""

    async def set_schedule(self, municipality_id: str, data: dict[str, Any]) -> None:
        """Overwrite data/schedule."""

    async def get_upcoming_events(
        self, municipality_id: str, today: date, limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Return events dated today or later, date ascending."""

    async def get_all_events(self, municipality_id: str) -> list[dict[str, Any]]:
        """Return all events, date ascending."""

    async def get_active_alerts(
        self, municipality_id: str, today: date
    ) -> list[dict[str, Any]]:
        """Return alerts that are active and within their date window."""

    async def get_facilities(self, municipality_id: str) -> list[dict[str, Any]]:
        """Return facilities."""

    async def get_road_closures(self, municipality_id: str) -> list[dict[str, Any]]:
        """Return road closures, start date ascending."""

    async def get_published_pages(self, municipality_id: str) -> list[dict[str, Any]]:
        """Return published pages ordered by menuOrder."""

    async def get_all_pages(self, municipality_id: str) -> list[dict[str, Any]]:
        """Return all pages (draft and published) ordered by menuOrder."""

    async def get_page_by_slug(
        self, municipality_id: str, slug: str, *, published_only: bool = True
    ) -> dict[str, Any] | None:
        """Return the page with this slug (published only unless asked otherwise)."""

    async def get_waste_items(self, municipality_id: str) -> list[dict[str, Any]]:
        """Return the waste-item catalog."""

    async def list_documents(
        self, municipality_id: str, collection: str, order_by: str | None = None
    ) -> list[dict[str, Any]]:
        """Return every document of a tenant collection, optionally ordered by a field."""

    async def get_document(
        self, municipality_id: str, collection: str, doc_id: str
    ) -> dict[str, Any] | None:
        """Return one document from a tenant collection, or None."""

    async def create_document(
        self,
        municipality_id: str,
        collection: str,
        data: dict[str, Any],
        doc_id: str | None = None,
    ) -> str:
        """Create a document (generated id when doc_id is None); return its id.

        Raise ResourceAlreadyExistsException when doc_id is taken.
        """

    async def update_document(
        self, municipality_id: str, collection: str, doc_id: str, data: dict[str, Any]
    ) -> None:
        """Update fields; raise ResourceNotFoundException if missing."""

    async def delete_document(
        self, municipality_id: str, collection: str, doc_id: str
    ) -> None:
        """Delete a document (idempotent)."""


class IAdminRepository(Protocol):
    """Protocol for admin accounts (top-level admins collection, keyed by uid)."""

    async def get(self, uid: str) -> AdminAccount | None:
        """Return the admin record, or None when missing or malformed."""

    async def get_document(self, uid: str) -> dict[str, Any] | None:
        """Return the raw stored record, or None."""

    async def list(self, municipality_id: str | None = None) -> list[dict[str, Any]]:
        """Return all admins, or those assigned to one municipality."""

    async def create(self, uid: str, data: dict[str, Any]) -> None:
        """Create the admin record for uid."""

    async def update(self, uid: str, data: dict[str, Any]) -> None:
        """Update fields; raise ResourceNotFoundException if missing."""

    async def touch_last_login(self, uid: str, when: datetime) -> None:
        """Stamp lastLogin."""
