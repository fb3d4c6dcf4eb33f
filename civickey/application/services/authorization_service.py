"""Role-based permission checks for admin operations.

The permission table maps feature -> action -> minimum role. The table is
static and closed: an undefined feature or action is always denied, for
every role. super-admin passes every defined check.
"""

from __future__ import annotations

from civickey.domain.enums import Role
from civickey.domain.exceptions import AuthorizationException

_CRUD_EDITOR = {
    "view": Role.VIEWER,
    "create": Role.EDITOR,
    "edit": Role.EDITOR,
    "delete": Role.EDITOR,
}

PERMISSIONS: dict[str, dict[str, Role]] = {
    "dashboard": {"view": Role.VIEWER},
    "announcements": dict(_CRUD_EDITOR),
    "events": dict(_CRUD_EDITOR),
    "facilities": dict(_CRUD_EDITOR),
    "roadClosures": dict(_CRUD_EDITOR),
    "wasteItems": dict(_CRUD_EDITOR),
    "pages": {**_CRUD_EDITOR, "publish": Role.EDITOR},
    "schedule": {"view": Role.VIEWER, "edit": Role.EDITOR},
    "zones": {
        "view": Role.VIEWER,
        "create": Role.ADMIN,
        "edit": Role.ADMIN,
        "delete": Role.ADMIN,
    },
    "municipalitySettings": {"view": Role.ADMIN, "edit": Role.ADMIN},
    "website": {"view": Role.ADMIN, "edit": Role.ADMIN},
    "adminManagement": {
        "view": Role.SUPER_ADMIN,
        "create": Role.SUPER_ADMIN,
        "edit": Role.SUPER_ADMIN,
        "delete": Role.SUPER_ADMIN,
    },
    "municipalities": {
        "view": Role.SUPER_ADMIN,
        "create": Role.SUPER_ADMIN,
        "edit": Role.SUPER_ADMIN,
        "delete": Role.SUPER_ADMIN,
    },
}


def has_min_role(role: Role | str | None, required: Role) -> bool:
    """Return True if role is at or above required in the hierarchy."""
    parsed = Role.parse(role)
    if parsed is None:
        return False
    if parsed is Role.SUPER_ADMIN:
        return True
    return parsed.rank >= required.rank


def can(role: Role | str | None, feature: str, action: str) -> bool:
    """Return True if role may perform action on feature (fail-closed)."""
    feature_permissions = PERMISSIONS.get(feature)
    if not feature_permissions:
        return False
    required = feature_permissions.get(action)
    if required is None:
        return False
    return has_min_role(role, required)


def assignable_roles(role: Role | str | None) -> list[Role]:
    """Roles this role may grant: super-admin grants viewer/editor/admin; nobody else grants any."""
    if Role.parse(role) is not Role.SUPER_ADMIN:
        return []
    return [Role.VIEWER, Role.EDITOR, Role.ADMIN]


class AuthorizationService:
    """Centralized permission checking for the admin API."""

    def check_permission(self, role: Role | str | None, feature: str, action: str) -> bool:
        return can(role, feature, action)

    def require_permission(
        self, role: Role | str | None, feature: str, action: str
    ) -> None:
        """Raise AuthorizationException if role lacks feature/action."""
        if not can(role, feature, action):
            raise AuthorizationException(feature=feature, action=action)

    def require_assignable(self, granter: Role | str | None, role: Role | str) -> None:
        """Raise AuthorizationException if granter may not assign role."""
        if Role.parse(role) not in assignable_roles(granter):
            raise AuthorizationException(
                feature="adminManagement",
                action="assign",
                message=f"Role {role!s} cannot be assigned",
            )
