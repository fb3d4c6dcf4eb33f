"""Super-admin use cases: municipality lifecycle and admin accounts."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from civickey.application.interfaces.repositories import (
    IAdminRepository,
    IContentStore,
    IMunicipalityDirectory,
)
from civickey.application.interfaces.services import ICacheService, IIdentityProvider
from civickey.application.services.authorization_service import AuthorizationService
from civickey.application.use_cases.municipality_content import invalidate_municipality
from civickey.core.constants import DEFAULT_COLLECTION_TYPES, DEFAULT_GUIDELINES
from civickey.domain.entities.admin import IMMUTABLE_ADMIN_FIELDS, AdminAccount, AdminSession
from civickey.domain.entities.municipality import MunicipalityEntity
from civickey.domain.enums import Role
from civickey.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    TenantNotFoundException,
    ValidationException,
)
from civickey.domain.value_objects.core import LocalizedText
from civickey.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def default_schedule() -> dict[str, Any]:
    """Schedule document seeded for a new municipality."""
    return {
        "collectionTypes": copy.deepcopy(DEFAULT_COLLECTION_TYPES),
        "schedules": {},
        "guidelines": copy.deepcopy(DEFAULT_GUIDELINES),
    }


class MunicipalityAdminService:
    """Municipality creation/deactivation and admin account management."""

    def __init__(
        self,
        directory: IMunicipalityDirectory,
        content: IContentStore,
        admin_repo: IAdminRepository,
        identity: IIdentityProvider,
        cache: ICacheService,
        *,
        authz: AuthorizationService | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.directory = directory
        self.content = content
        self.admin_repo = admin_repo
        self.identity = identity
        self.cache = cache
        self.authz = authz or AuthorizationService()
        self._clock = clock

    # Municipalities

    async def list_municipalities(self, session: AdminSession) -> list[dict[str, Any]]:
        self.authz.require_permission(session.role, "municipalities", "view")
        return await self.directory.list_all()

    async def create_municipality(
        self, session: AdminSession, municipality_id: str, data: dict[str, Any]
    ) -> str:
        """Create a municipality with default colors and a default schedule.

        Raises ResourceAlreadyExistsException if the id is taken.
        """
        self.authz.require_permission(session.role, "municipalities", "create")
        name = LocalizedText.from_value(data.get("name"))
        entity = MunicipalityEntity(
            id=municipality_id,
            name=LocalizedText(
                en=data.get("nameEn") or name.en or name.fr,
                fr=data.get("nameFr") or name.fr or name.en,
            ),
        )
        if data.get("province"):
            entity.province = data["province"]
        if data.get("colors"):
            entity.colors = data["colors"]
        if data.get("contact"):
            entity.contact = data["contact"]
        entity.logo = data.get("logo")
        doc = entity.to_document()
        doc["population"] = int(data.get("population") or 0)
        now = self._clock()
        doc["createdAt"] = now
        doc["updatedAt"] = now
        await self.directory.create(municipality_id, doc)
        schedule = default_schedule()
        schedule["createdAt"] = now
        schedule["updatedAt"] = now
        await self.content.set_schedule(municipality_id, schedule)
        await invalidate_municipality(self.cache, municipality_id)
        logger.info("Municipality created: %s by uid=%s", municipality_id, session.admin.uid)
        return municipality_id

    async def set_municipality_active(
        self, session: AdminSession, municipality_id: str, active: bool
    ) -> None:
        """Deactivate or reactivate; municipalities are never deleted."""
        self.authz.require_permission(session.role, "municipalities", "edit")
        if await self.directory.get_config(municipality_id) is None:
            raise TenantNotFoundException(municipality_id)
        now = self._clock()
        await self.directory.update(
            municipality_id,
            {
                "active": active,
                "deactivatedAt": None if active else now,
                "updatedAt": now,
            },
        )
        await invalidate_municipality(self.cache, municipality_id)
        logger.info(
            "Municipality %s %s by uid=%s",
            municipality_id,
            "reactivated" if active else "deactivated",
            session.admin.uid,
        )

    # Admin accounts

    async def list_admins(
        self, session: AdminSession, municipality_id: str | None = None
    ) -> list[dict[str, Any]]:
        self.authz.require_permission(session.role, "adminManagement", "view")
        return await self.admin_repo.list(municipality_id)

    async def get_admin(self, session: AdminSession, uid: str) -> dict[str, Any]:
        self.authz.require_permission(session.role, "adminManagement", "view")
        data = await self.admin_repo.get_document(uid)
        if data is None:
            raise ResourceNotFoundException("Admin", uid)
        return data

    async def create_admin(
        self,
        session: AdminSession,
        *,
        email: str,
        name: str,
        municipality_id: str | None,
        role: str = Role.EDITOR.value,
    ) -> str:
        """Create the identity account and admin record, then send a reset email.

        The new admin sets their own password from the reset email; a
        failure to send it is logged and does not undo the account.
        """
        self.authz.require_permission(session.role, "adminManagement", "create")
        parsed = Role.parse(role)
        if parsed is None:
            raise ValidationException(f"Invalid role: {role}", field="role")
        self.authz.require_assignable(session.role, parsed)
        email = (email or "").strip().lower()
        if "@" not in email:
            raise ValidationException("A valid email is required", field="email")
        if not municipality_id:
            raise ValidationException("Municipality is required", field="municipalityId")
        if await self.directory.get_config(municipality_id) is None:
            raise TenantNotFoundException(municipality_id)

        uid = await self.identity.create_account(email, name)
        now = self._clock()
        account = AdminAccount(
            uid=uid,
            email=email,
            role=parsed,
            municipality_id=municipality_id,
            name=name,
            created_at=now,
            created_by=session.admin.uid,
        )
        doc = account.to_document()
        doc["updatedAt"] = now
        await self.admin_repo.create(uid, doc)
        try:
            await self.identity.send_password_reset(email)
        except Exception:
            logger.exception("Failed to send welcome reset email to uid=%s", uid)
        logger.info("Admin created: uid=%s role=%s by uid=%s", uid, parsed.value, session.admin.uid)
        return uid

    async def update_admin(self, session: AdminSession, uid: str, data: dict[str, Any]) -> None:
        """Update name, role, municipality or active flag; email and timestamps are immutable."""
        self.authz.require_permission(session.role, "adminManagement", "edit")
        safe = {k: v for k, v in data.items() if k not in IMMUTABLE_ADMIN_FIELDS}
        if "role" in safe:
            parsed = Role.parse(safe["role"])
            if parsed is None:
                raise ValidationException(f"Invalid role: {safe['role']}", field="role")
            self.authz.require_assignable(session.role, parsed)
            safe["role"] = parsed.value
        if safe.get("active") is False and uid == session.admin.uid:
            raise AuthorizationException(
                "adminManagement", "edit", "You cannot deactivate your own account"
            )
        if safe.get("municipalityId"):
            if await self.directory.get_config(safe["municipalityId"]) is None:
                raise TenantNotFoundException(safe["municipalityId"])
        safe["updatedAt"] = self._clock()
        await self.admin_repo.update(uid, safe)

    async def set_admin_active(self, session: AdminSession, uid: str, active: bool) -> None:
        """Soft-deactivate or reactivate an admin; deactivation also revokes their sessions."""
        self.authz.require_permission(session.role, "adminManagement", "edit")
        if not active and uid == session.admin.uid:
            raise AuthorizationException(
                "adminManagement", "edit", "You cannot deactivate your own account"
            )
        now = self._clock()
        await self.admin_repo.update(
            uid,
            {"active": active, "deactivatedAt": None if active else now, "updatedAt": now},
        )
        if not active:
            try:
                await self.identity.sign_out(uid)
            except Exception:
                logger.exception("Failed to revoke sessions for deactivated uid=%s", uid)

    async def send_password_reset(self, session: AdminSession, uid: str) -> None:
        self.authz.require_permission(session.role, "adminManagement", "edit")
        data = await self.get_admin(session, uid)
        await self.identity.send_password_reset(data.get("email") or "")
