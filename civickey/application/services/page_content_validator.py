"""Validates custom page content against the JSON schema for its page type."""

from __future__ import annotations

from typing import Any

import jsonschema

from civickey.domain.enums import PageType
from civickey.domain.exceptions import ValidationException

_LOCALIZED = {
    "type": "object",
    "properties": {"en": {"type": "string"}, "fr": {"type": "string"}},
    "additionalProperties": False,
}
_STRING_OR_NULL = {"type": ["string", "null"]}


def _object(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _array_of(item: dict[str, Any]) -> dict[str, Any]:
    return {"type": "array", "items": item}


PAGE_CONTENT_SCHEMAS: dict[PageType, dict[str, Any]] = {
    PageType.TEXT: _object(
        {
            "body": _LOCALIZED,
            "featuredImage": _STRING_OR_NULL,
            "contactInfo": _object({"phone": _STRING_OR_NULL, "email": _STRING_OR_NULL}),
        }
    ),
    PageType.INFO_CARDS: _object(
        {
            "intro": _LOCALIZED,
            "cards": _array_of(
                _object(
                    {"title": _LOCALIZED, "description": _LOCALIZED, "icon": _STRING_OR_NULL},
                    required=["title"],
                )
            ),
        }
    ),
    PageType.PDF: _object(
        {
            "description": _LOCALIZED,
            "documents": _array_of(
                _object(
                    {
                        "title": _LOCALIZED,
                        "url": {"type": "string", "minLength": 1},
                        "description": _LOCALIZED,
                    },
                    required=["title", "url"],
                )
            ),
        }
    ),
    PageType.COUNCIL: _object(
        {
            "members": _array_of(
                _object(
                    {
                        "name": {"type": "string", "minLength": 1},
                        "role": _LOCALIZED,
                        "photoUrl": _STRING_OR_NULL,
                        "email": _STRING_OR_NULL,
                        "phone": _STRING_OR_NULL,
                    },
                    required=["name"],
                )
            )
        }
    ),
    PageType.LINKS: _object(
        {
            "categories": _array_of(
                _object(
                    {
                        "title": _LOCALIZED,
                        "links": _array_of(
                            _object(
                                {
                                    "title": _LOCALIZED,
                                    "url": {"type": "string", "minLength": 1},
                                    "icon": _STRING_OR_NULL,
                                },
                                required=["title", "url"],
                            )
                        ),
                    },
                    required=["title"],
                )
            )
        }
    ),
    PageType.CONTACT: _object(
        {
            "address": {"type": ["string", "object", "null"]},
            "phone": _STRING_OR_NULL,
            "email": _STRING_OR_NULL,
            "hours": {"type": ["string", "object", "null"]},
            "departments": _array_of(
                _object(
                    {
                        "name": _LOCALIZED,
                        "phone": _STRING_OR_NULL,
                        "email": _STRING_OR_NULL,
                        "hours": {"type": ["string", "object", "null"]},
                    },
                    required=["name"],
                )
            ),
        }
    ),
}


class PageContentValidator:
    """Validates page content for a page type; raises ValidationException."""

    def validate(self, page_type: PageType | str, content: dict[str, Any]) -> None:
        try:
            ptype = PageType(page_type)
        except ValueError as e:
            raise ValidationException(f"Unknown page type: {page_type!r}", field="type") from e
        schema = PAGE_CONTENT_SCHEMAS[ptype]
        try:
            jsonschema.validate(instance=content, schema=schema)
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path) or "content"
            raise ValidationException(
                f"Invalid {ptype.value} page content at {location}: {e.message}",
                field="content",
            ) from e
