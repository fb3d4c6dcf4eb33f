"""Admin account and admin session domain entities."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from civickey.domain.enums import Role
from civickey.domain.exceptions import AuthorizationException, ValidationException

# Fields an update may never change.
IMMUTABLE_ADMIN_FIELDS = frozenset({"email", "createdAt", "lastLogin"})


@dataclass
class AdminAccount:
    """Admin record keyed by identity-provider UID.

    municipality_id is the immutable assignment for non-super-admins;
    super-admins have none.
    """

    uid: str
    email: str
    role: Role
    municipality_id: str | None = None
    name: str = ""
    active: bool = True
    created_at: datetime | None = None
    last_login: datetime | None = None
    created_by: str | None = None

    def __post_init__(self) -> None:
        if not self.uid:
            raise ValidationException("Admin uid is required", field="uid")
        if self.role is not Role.SUPER_ADMIN and not self.municipality_id:
            raise ValidationException(
                "Admins other than super-admin need a municipality", field="municipalityId"
            )

    @property
    def is_super_admin(self) -> bool:
        return self.role is Role.SUPER_ADMIN

    @classmethod
    def from_document(cls, uid: str, data: dict[str, Any]) -> "AdminAccount | None":
        """Build from a stored record; None when the stored role is not a known role."""
        role = Role.parse(data.get("role"))
        if role is None:
            return None
        return cls(
            uid=uid,
            email=data.get("email") or "",
            role=role,
            municipality_id=data.get("municipalityId") or None,
            name=data.get("name") or "",
            active=data.get("active", True) is not False,
            created_at=data.get("createdAt"),
            last_login=data.get("lastLogin"),
            created_by=data.get("createdBy"),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "municipalityId": self.municipality_id,
            "active": self.active,
            "createdAt": self.created_at,
            "lastLogin": self.last_login,
            "createdBy": self.created_by,
        }


@dataclass(frozen=True)
class AdminSession:
    """Who is acting, and on which municipality.

    assigned_municipality comes from the trusted admin record and never
    changes. active_municipality is the super-admin's runtime selection;
    for everyone else it is always the assignment.
    """

    admin: AdminAccount
    assigned_municipality: str | None
    active_municipality: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def start(cls, admin: AdminAccount) -> "AdminSession":
        return cls(
            admin=admin,
            assigned_municipality=admin.municipality_id,
            active_municipality=admin.municipality_id,
        )

    @property
    def role(self) -> Role:
        return self.admin.role

    @property
    def effective_municipality(self) -> str | None:
        """Active selection for super-admins, the assignment for everyone else."""
        if self.admin.is_super_admin:
            return self.active_municipality
        return self.assigned_municipality

    def switch_to(self, municipality_id: str) -> "AdminSession":
        """Return a session with a new active municipality (super-admin only)."""
        if not self.admin.is_super_admin:
            raise AuthorizationException(
                "municipalities", "switch", "Only super-admins may switch municipality"
            )
        return replace(self, active_municipality=municipality_id)
