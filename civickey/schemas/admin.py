"""Admin account API schemas (super-admin management)."""

from typing import Any

from pydantic import BaseModel, Field

from civickey.domain.enums import Role


class AdminCreateRequest(BaseModel):
    """Request body for POST /admin/admins. The new admin sets a password from the reset email."""

    email: str = Field(..., min_length=3, max_length=320)
    name: str = Field(default="", max_length=255)
    municipality_id: str = Field(..., min_length=1, max_length=64)
    role: str = Field(default=Role.EDITOR.value)


class AdminUpdateRequest(BaseModel):
    """Request body for PATCH /admin/admins/{uid}. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, max_length=255)
    role: str | None = None
    municipality_id: str | None = Field(default=None, max_length=64)
    active: bool | None = None

    def to_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.name is not None:
            data["name"] = self.name
        if self.role is not None:
            data["role"] = self.role
        if self.municipality_id is not None:
            data["municipalityId"] = self.municipality_id
        if self.active is not None:
            data["active"] = self.active
        return data
