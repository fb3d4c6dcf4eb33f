"""DTOs for identity-provider results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityUser:
    """Result of a successful email/password sign-in."""

    uid: str
    email: str
    id_token: str
    refresh_token: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Verified ID-token claims the admin API relies on."""

    uid: str
    auth_time: int
    email: str | None = None
