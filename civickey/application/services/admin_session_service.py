"""Admin sign-in, per-request authentication and municipality switching.

Role and municipality assignment always come from the admin record in the
store, read on every call; nothing the client sends (token claims aside)
is trusted for authorization.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from civickey.application.dtos.identity import IdentityUser, TokenClaims
from civickey.application.interfaces.repositories import (
    IAdminRepository,
    IMunicipalityDirectory,
)
from civickey.application.interfaces.services import IIdentityProvider
from civickey.application.services import identity_messages as msg
from civickey.application.services.session_guard import SessionActivityTracker
from civickey.domain.entities.admin import AdminAccount, AdminSession
from civickey.domain.exceptions import (
    AuthorizationException,
    IdentityException,
    SessionExpiredException,
    TenantNotFoundException,
    ValidationException,
)
from civickey.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AdminSessionService:
    def __init__(
        self,
        identity: IIdentityProvider,
        admin_repo: IAdminRepository,
        directory: IMunicipalityDirectory,
        tracker: SessionActivityTracker | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.identity = identity
        self.admin_repo = admin_repo
        self.directory = directory
        self.tracker = tracker
        self._clock = clock

    async def sign_in(
        self, email: str, password: str
    ) -> tuple[IdentityUser, AdminSession]:
        """Sign in and load the admin record.

        Raises IdentityException (closed message set). Accounts without an
        admin record, or with a deactivated one, are signed out again.
        """
        user = await self.identity.sign_in(email, password)
        session = await self._load_session(user.uid)
        try:
            await self.admin_repo.touch_last_login(user.uid, self._clock())
        except Exception:
            logger.exception("Failed to stamp lastLogin for uid=%s", user.uid)
        logger.info("Admin signed in: uid=%s role=%s", user.uid, session.role.value)
        return user, session

    async def sign_out(self, claims: TokenClaims) -> None:
        """Revoke the identity session; failures are logged, not raised."""
        if self.tracker is not None:
            await self.tracker.end(claims.uid, claims.auth_time)
        await self._force_sign_out(claims.uid)

    async def send_password_reset(self, email: str) -> None:
        await self.identity.send_password_reset(email)

    async def authenticate(
        self, id_token: str, requested_municipality: str | None = None
    ) -> AdminSession:
        """Resolve a bearer token into an AdminSession for one request.

        requested_municipality is honored for super-admins only (after
        checking it exists and is active); for everyone else it is ignored
        and the assignment is used.
        """
        claims = await self.identity.verify_token(id_token)
        if self.tracker is not None:
            try:
                await self.tracker.touch(claims.uid, claims.auth_time)
            except SessionExpiredException:
                await self._force_sign_out(claims.uid)
                raise
        session = await self._load_session(claims.uid)
        if requested_municipality and session.admin.is_super_admin:
            await self._require_active_municipality(requested_municipality)
            session = session.switch_to(requested_municipality)
        return session

    async def switch_municipality(
        self, session: AdminSession, municipality_id: str
    ) -> AdminSession:
        """Return a session acting on municipality_id (super-admin only).

        The role is re-read from the admin record rather than taken from
        the session passed in.
        """
        admin = await self.admin_repo.get(session.admin.uid)
        if admin is None or not admin.active or not admin.is_super_admin:
            logger.warning(
                "Municipality switch refused for uid=%s", session.admin.uid
            )
            raise AuthorizationException(
                "municipalities", "switch", "Only super-admins may switch municipality"
            )
        await self._require_active_municipality(municipality_id)
        return AdminSession.start(admin).switch_to(municipality_id)

    async def _require_active_municipality(self, municipality_id: str) -> None:
        config = await self.directory.get_config(municipality_id)
        if not config or config.get("active") is False:
            raise TenantNotFoundException(municipality_id)

    async def _load_session(self, uid: str) -> AdminSession:
        try:
            data = await self.admin_repo.get_document(uid)
        except Exception as e:
            logger.exception("Error fetching admin data for uid=%s", uid)
            raise IdentityException(msg.ADMIN_DATA_LOAD_FAILED, msg.REASON_UNKNOWN) from e
        if data is None:
            logger.warning("User not found in admins collection: uid=%s", uid)
            await self._force_sign_out(uid)
            raise IdentityException(msg.NOT_AUTHORIZED, msg.REASON_NOT_ADMIN)
        if data.get("active") is False:
            await self._force_sign_out(uid)
            raise IdentityException(msg.ACCOUNT_DEACTIVATED, msg.REASON_DEACTIVATED)
        try:
            admin = AdminAccount.from_document(uid, data)
        except ValidationException:
            admin = None
        if admin is None:
            logger.warning("Admin record is malformed: uid=%s", uid)
            await self._force_sign_out(uid)
            raise IdentityException(msg.NOT_AUTHORIZED, msg.REASON_NOT_ADMIN)
        return AdminSession.start(admin)

    async def _force_sign_out(self, uid: str) -> None:
        try:
            await self.identity.sign_out(uid)
        except Exception:
            logger.exception("Sign out failed for uid=%s", uid)
