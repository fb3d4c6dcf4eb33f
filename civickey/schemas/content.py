"""Admin content API schemas.

Content documents (events, alerts, facilities, road closures, waste items,
zones, schedule, settings, website) are free-form JSON objects; only pages
carry a typed request body.
"""

from typing import Any

from pydantic import BaseModel, Field


class PageCreateRequest(BaseModel):
    """Request body for POST /admin/pages. The normalized slug is the page id."""

    slug: str = Field(..., min_length=1, max_length=100)
    type: str = Field(..., description="text, info-cards, pdf, council, links or contact")
    title: Any = None
    content: dict[str, Any] = Field(default_factory=dict)
    status: str = Field(default="draft")
    show_in_menu: bool = True
    menu_order: int = 0

    def to_data(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "type": self.type,
            "title": self.title,
            "content": self.content,
            "status": self.status,
            "showInMenu": self.show_in_menu,
            "menuOrder": self.menu_order,
        }


class ZoneCreateRequest(BaseModel):
    """Request body for POST /admin/zones; id is optional (generated when absent)."""

    id: str | None = Field(default=None, max_length=64)
    name: Any
    description: Any = None
    color: str | None = None

    def to_data(self) -> dict[str, Any]:
        return self.model_dump(exclude={"id"}, exclude_none=True)


class PublishRequest(BaseModel):
    published: bool
