"""Admin console authentication: sign-in, sign-out, password reset, profile, municipality switch."""

import logging

from fastapi import APIRouter, Depends, Request

from civickey.api.v1.dependencies import (
    AdminSessionDep,
    SessionServiceDep,
    get_token_claims,
)
from civickey.application.dtos.identity import TokenClaims
from civickey.core.limiter import limit_auth
from civickey.domain.entities.admin import AdminSession
from civickey.schemas.auth import (
    AdminProfile,
    MessageResponse,
    PasswordResetRequest,
    SignInRequest,
    SignInResponse,
    SwitchMunicipalityRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _profile(session: AdminSession) -> AdminProfile:
    admin = session.admin
    return AdminProfile(
        uid=admin.uid,
        email=admin.email,
        name=admin.name,
        role=admin.role.value,
        municipality_id=session.assigned_municipality,
        active_municipality_id=session.effective_municipality,
    )


@router.post("/sign-in", response_model=SignInResponse)
@limit_auth
async def sign_in(
    request: Request, body: SignInRequest, sessions: SessionServiceDep
) -> SignInResponse:
    """Sign in with email and password.

    Identity failures answer 401 with one of a fixed set of messages;
    accounts without an active admin record are signed out again.
    """
    user, session = await sessions.sign_in(body.email.strip(), body.password)
    return SignInResponse(
        id_token=user.id_token,
        refresh_token=user.refresh_token,
        admin=_profile(session),
    )


@router.post("/sign-out", response_model=MessageResponse)
async def sign_out(
    sessions: SessionServiceDep, claims: TokenClaims = Depends(get_token_claims)
) -> MessageResponse:
    """Revoke the caller's identity session."""
    await sessions.sign_out(claims)
    return MessageResponse(message="Signed out.")


@router.post("/password-reset", response_model=MessageResponse)
@limit_auth
async def send_password_reset(
    request: Request, body: PasswordResetRequest, sessions: SessionServiceDep
) -> MessageResponse:
    await sessions.send_password_reset(body.email.strip())
    return MessageResponse(message="Password reset email sent.")


@router.get("/me", response_model=AdminProfile)
async def me(session: AdminSessionDep) -> AdminProfile:
    return _profile(session)


@router.post("/switch-municipality", response_model=AdminProfile)
async def switch_municipality(
    body: SwitchMunicipalityRequest,
    session: AdminSessionDep,
    sessions: SessionServiceDep,
) -> AdminProfile:
    """Validate a super-admin's municipality selection.

    The selection is not stored server-side: subsequent requests carry it
    in the X-Municipality-ID header and it is re-validated each time.
    """
    switched = await sessions.switch_municipality(session, body.municipality_id)
    logger.info(
        "uid=%s switched to municipality %s", session.admin.uid, body.municipality_id
    )
    return _profile(switched)
