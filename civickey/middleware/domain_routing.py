"""Hostname-based tenant routing for the public website.

Rewrites {municipality}.{base_domain}/path and custom-domain requests to
/{municipality}/{locale}/path, and redirects development-host requests
that lack a locale segment. The resolved municipality and locale are
stored in request.state for the site routes.

Raw ASGI; the resolver comes from the AppContext on app.state, so the
middleware is a no-op until the lifespan has built it.
"""

import logging
from typing import Callable
from urllib.parse import quote

from starlette.requests import Request
from starlette.responses import RedirectResponse

from civickey.application.dtos.routing import RouteAction

logger = logging.getLogger(__name__)


def DomainRoutingMiddleware(
    app: Callable,
    cookie_name: str = "locale",
    excluded_segments: tuple[str, ...] = ("docs", "redoc"),
) -> Callable:
    """Resolve the tenant from Host and rewrite or redirect the request.

    Paths whose first segment is in excluded_segments (API docs) are never routed.
    """
    excluded = frozenset(excluded_segments)

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        starlette_app = scope.get("app")
        ctx = getattr(getattr(starlette_app, "state", None), "context", None)
        first_segment = scope["path"].lstrip("/").split("/", 1)[0]
        if ctx is None or first_segment in excluded:
            await app(scope, receive, send)
            return

        request = Request(scope)
        decision = await ctx.resolver.route(
            request.headers.get("host"),
            scope["path"],
            request.cookies.get(cookie_name),
            request.headers.get("accept-language"),
        )
        state = scope.setdefault("state", {})
        state["municipality_id"] = decision.municipality_id
        state["locale"] = decision.locale

        if decision.action == RouteAction.REDIRECT:
            target = decision.path or "/"
            if scope.get("query_string"):
                target += "?" + scope["query_string"].decode("latin-1")
            response = RedirectResponse(target, status_code=307)
            await response(scope, receive, send)
            return
        if decision.action == RouteAction.REWRITE and decision.path:
            logger.debug("Rewriting %s -> %s", scope["path"], decision.path)
            scope = dict(scope)
            scope["path"] = decision.path
            scope["raw_path"] = quote(decision.path).encode("ascii")
        await app(scope, receive, send)

    return asgi_app
