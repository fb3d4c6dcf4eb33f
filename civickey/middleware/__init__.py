"""HTTP middleware: request ID and hostname-based tenant routing.

Applied in main app; order matters (first added = outermost).
Import and use from civickey.main.
"""

from civickey.middleware.domain_routing import DomainRoutingMiddleware
from civickey.middleware.request_id import RequestIDMiddleware

__all__ = ["DomainRoutingMiddleware", "RequestIDMiddleware"]
