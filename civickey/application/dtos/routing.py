"""DTOs for hostname routing decisions."""

from dataclasses import dataclass
from enum import Enum


class RouteAction(str, Enum):
    PASS = "pass"
    REWRITE = "rewrite"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class RouteDecision:
    """What the routing middleware should do with a request.

    path is the rewritten path (REWRITE) or the redirect target (REDIRECT).
    """

    action: RouteAction
    municipality_id: str | None = None
    locale: str | None = None
    path: str | None = None

    @classmethod
    def passthrough(
        cls, municipality_id: str | None = None, locale: str | None = None
    ) -> "RouteDecision":
        return cls(RouteAction.PASS, municipality_id, locale)
