"""Municipality API schemas (public listing and super-admin management)."""

from typing import Any

from pydantic import BaseModel, Field


class MunicipalityCreateRequest(BaseModel):
    """Request body for POST /admin/municipalities (super-admin).

    The id becomes the document id and every subdomain, so it must be a slug.
    """

    id: str = Field(
        ...,
        min_length=2,
        max_length=64,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Municipality id (lowercase, hyphen-separated slug)",
    )
    name_en: str = Field(..., min_length=1, max_length=255)
    name_fr: str = Field(..., min_length=1, max_length=255)
    province: str | None = Field(default=None, max_length=64)
    population: int | None = Field(default=None, ge=0)
    colors: dict[str, str] | None = None
    contact: dict[str, Any] | None = None
    logo: str | None = None

    def to_data(self) -> dict[str, Any]:
        data = self.model_dump(exclude={"id", "name_en", "name_fr"}, exclude_none=True)
        data["nameEn"] = self.name_en
        data["nameFr"] = self.name_fr
        return data


class ActiveUpdate(BaseModel):
    """Request body for activate/deactivate endpoints."""

    active: bool


class CreatedResponse(BaseModel):
    id: str
