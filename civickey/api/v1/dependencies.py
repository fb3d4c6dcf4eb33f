"""Presentation-layer dependency injection (composition root).

Every collaborator comes from the AppContext built in the lifespan;
routes depend only on these dependencies, never on infrastructure
directly. Tests override get_context (or place a context on app.state).
"""

from typing import Annotated

from fastapi import Depends, Path, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from civickey.application.dtos.identity import TokenClaims
from civickey.application.services.admin_session_service import AdminSessionService
from civickey.application.use_cases.content_management import ContentManagementService
from civickey.application.use_cases.municipality_admin import MunicipalityAdminService
from civickey.application.use_cases.municipality_content import MunicipalityContentService
from civickey.core.config import get_settings
from civickey.core.context import AppContext
from civickey.core.tenant_validation import is_valid_municipality_id_format
from civickey.domain.entities.admin import AdminSession
from civickey.domain.enums import Role
from civickey.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    StoreNotConfiguredException,
    TenantNotFoundException,
)

_bearer = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    """AppContext from app.state; 503 until the lifespan has built it."""
    ctx = getattr(request.app.state, "context", None)
    if ctx is None:
        raise StoreNotConfiguredException()
    return ctx


ContextDep = Annotated[AppContext, Depends(get_context)]


def get_content_service(ctx: ContextDep) -> MunicipalityContentService:
    return ctx.content_service()


def get_management_service(ctx: ContextDep) -> ContentManagementService:
    return ctx.management_service()


def get_municipality_admin_service(ctx: ContextDep) -> MunicipalityAdminService:
    return ctx.municipality_admin_service()


def get_session_service(ctx: ContextDep) -> AdminSessionService:
    return ctx.session_service()


ContentServiceDep = Annotated[MunicipalityContentService, Depends(get_content_service)]
ManagementServiceDep = Annotated[ContentManagementService, Depends(get_management_service)]
MunicipalityAdminDep = Annotated[
    MunicipalityAdminService, Depends(get_municipality_admin_service)
]
SessionServiceDep = Annotated[AdminSessionService, Depends(get_session_service)]


async def get_active_municipality(
    municipality_id: Annotated[str, Path(min_length=1, max_length=64)],
    content: ContentServiceDep,
) -> str:
    """Path municipality id, checked to exist and be active (404 otherwise)."""
    if not is_valid_municipality_id_format(municipality_id):
        raise TenantNotFoundException(municipality_id)
    await content.require_active_config(municipality_id)
    return municipality_id


ActiveMunicipalityDep = Annotated[str, Depends(get_active_municipality)]


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Missing bearer token")
    return credentials.credentials


async def get_token_claims(
    token: Annotated[str, Depends(get_bearer_token)], ctx: ContextDep
) -> TokenClaims:
    if ctx.identity is None:
        raise StoreNotConfiguredException()
    return await ctx.identity.verify_token(token)


async def get_admin_session(
    request: Request,
    token: Annotated[str, Depends(get_bearer_token)],
    sessions: SessionServiceDep,
) -> AdminSession:
    """Authenticate the bearer token and load the admin record for this request.

    The X-Municipality-ID header selects the active municipality for
    super-admins and is ignored for everyone else.
    """
    requested = request.headers.get(get_settings().municipality_header_name)
    return await sessions.authenticate(token, requested or None)


AdminSessionDep = Annotated[AdminSession, Depends(get_admin_session)]


def require_super_admin(session: AdminSessionDep) -> AdminSession:
    if session.role is not Role.SUPER_ADMIN:
        raise AuthorizationException("municipalities", "manage", "Super-admin access required")
    return session


SuperAdminDep = Annotated[AdminSession, Depends(require_super_admin)]
