"""Custom website page entity."""

from dataclasses import dataclass, field
from typing import Any

from civickey.domain.enums import PageStatus, PageType
from civickey.domain.exceptions import ValidationException
from civickey.domain.value_objects.core import LocalizedText, PageSlug


@dataclass
class PageEntity:
    """A municipality's custom page; the slug is its document id.

    content's shape depends on page_type and is checked by
    PageContentValidator before writes.
    """

    slug: str
    page_type: PageType
    title: LocalizedText
    content: dict[str, Any] = field(default_factory=dict)
    status: PageStatus = PageStatus.DRAFT
    menu_order: int = 0
    show_in_menu: bool = True

    @classmethod
    def create(
        cls,
        raw_slug: str,
        page_type: str,
        title: Any,
        content: dict[str, Any] | None = None,
        status: str = PageStatus.DRAFT.value,
        menu_order: int = 0,
        show_in_menu: bool = True,
    ) -> "PageEntity":
        """Normalize the slug and validate type/status; raises ValidationException."""
        try:
            slug = PageSlug.normalize(raw_slug).value
        except ValueError as e:
            raise ValidationException(str(e), field="slug") from e
        try:
            ptype = PageType(page_type)
        except ValueError as e:
            raise ValidationException(
                f"Unknown page type: {page_type!r}", field="type"
            ) from e
        try:
            pstatus = PageStatus(status)
        except ValueError as e:
            raise ValidationException(
                f"Unknown page status: {status!r}", field="status"
            ) from e
        text = LocalizedText.from_value(title)
        if not (text.en or text.fr):
            raise ValidationException("Page title is required", field="title")
        return cls(
            slug=slug,
            page_type=ptype,
            title=text,
            content=content or {},
            status=pstatus,
            menu_order=menu_order,
            show_in_menu=show_in_menu,
        )

    @property
    def is_published(self) -> bool:
        return self.status is PageStatus.PUBLISHED

    def to_document(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "type": self.page_type.value,
            "title": self.title.to_dict(),
            "content": self.content,
            "status": self.status.value,
            "menuOrder": self.menu_order,
            "showInMenu": self.show_in_menu,
        }
