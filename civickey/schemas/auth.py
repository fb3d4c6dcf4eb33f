"""Auth API schemas."""

from pydantic import BaseModel, Field


class SignInRequest(BaseModel):
    """Request body for POST /auth/sign-in (email + password)."""

    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    """Request body for POST /auth/password-reset."""

    email: str = Field(..., min_length=1, max_length=320)


class SwitchMunicipalityRequest(BaseModel):
    """Request body for POST /auth/switch-municipality (super-admin only)."""

    municipality_id: str = Field(..., min_length=1, max_length=64)


class AdminProfile(BaseModel):
    """The signed-in admin as seen by the console."""

    uid: str
    email: str
    name: str = ""
    role: str
    municipality_id: str | None = None
    active_municipality_id: str | None = None


class SignInResponse(BaseModel):
    """Tokens from the identity service plus the admin profile."""

    id_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    admin: AdminProfile


class MessageResponse(BaseModel):
    message: str
