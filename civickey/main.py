"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
No business logic here. See civickey.core.lifespan and civickey.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().

Run locally with: uvicorn civickey.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from civickey.api.site import site_router
from civickey.api.v1 import api_router
from civickey.core.config import get_settings
from civickey.core.exception_handlers import register_exception_handlers
from civickey.core.lifespan import create_lifespan
from civickey.core.limiter import limiter
from civickey.middleware import DomainRoutingMiddleware, RequestIDMiddleware
from civickey.shared.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # Middleware: first added = innermost. Order (outer → inner): request ID → domain routing → CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(DomainRoutingMiddleware, cookie_name=settings.locale_cookie_name)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)

    # API first: the website's /{municipality}/{locale}/{slug} pattern would also match /api paths.
    app.include_router(api_router, prefix="/api/v1")
    app.include_router(site_router)

    return app


app = create_app()
