"""Service interfaces (ports) for the application layer.

Protocols define contracts for external collaborators (DIP): cache, identity
provider, local key-value storage, reminder delivery, domain registrar.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from civickey.application.dtos.identity import IdentityUser, TokenClaims
    from civickey.application.dtos.reminder import (
        OneShotTrigger,
        ReminderContent,
        WeeklyTrigger,
    )


class ICacheService(Protocol):
    """Protocol for cache backends (Redis or in-process)."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int | float = 300) -> bool:
        """Store value with TTL in seconds."""

    async def delete(self, key: str) -> bool:
        """Remove key from cache."""

    async def delete_pattern(self, pattern: str) -> int:
        """Remove keys matching a glob pattern; return number removed."""


class IIdentityProvider(Protocol):
    """Protocol for the opaque identity service (sign-in, tokens, accounts)."""

    async def sign_in(self, email: str, password: str) -> IdentityUser:
        """Sign in with email/password; raise IdentityException on failure."""

    async def verify_token(self, id_token: str) -> TokenClaims:
        """Verify an ID token; raise AuthenticationException if invalid."""

    async def sign_out(self, uid: str) -> None:
        """Revoke the user's sessions (refresh tokens)."""

    async def send_password_reset(self, email: str) -> None:
        """Send a password reset email; raise IdentityException on failure."""

    async def create_account(self, email: str, display_name: str = "") -> str:
        """Create an identity account with a random password; return its uid."""


class IKeyValueStore(Protocol):
    """Protocol for local persistent key-value storage (string values)."""

    async def get_item(self, key: str) -> str | None:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...

    async def multi_remove(self, keys: list[str]) -> None:
        ...

    async def get_all_keys(self) -> list[str]:
        ...


class IReminderDelivery(Protocol):
    """Protocol for the platform notification scheduler (delivery is external)."""

    async def schedule(
        self, content: ReminderContent, trigger: WeeklyTrigger | OneShotTrigger
    ) -> str:
        """Schedule a local notification; return its identifier."""

    async def cancel(self, notification_id: str) -> None:
        """Cancel a scheduled notification (unknown ids are ignored)."""


class IDomainRegistrar(Protocol):
    """Protocol for the hosting provider's custom-domain API."""

    async def add_domain(self, domain: str) -> dict[str, Any]:
        """Attach domain to the project; raise DomainRegistrationException on error."""

    async def remove_domain(self, domain: str) -> dict[str, Any]:
        """Detach domain from the project; raise DomainRegistrationException on error."""

    async def verify_domain(self, domain: str) -> dict[str, Any]:
        """Check the CNAME record; return {domain, verified, records}."""


class ISnapshotFetcher(Protocol):
    """Protocol for fetching a municipality's aggregate snapshot (client side)."""

    async def fetch_all(self, municipality_id: str) -> dict[str, Any]:
        """Return the snapshot dict (config, zones, schedule, events, alerts, facilities, fetchedAt)."""

    async def fetch_waste_items(self, municipality_id: str) -> list[dict[str, Any]]:
        """Return the waste-item catalog."""
