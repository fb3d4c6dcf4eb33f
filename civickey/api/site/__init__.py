"""Public website data routes (reached through hostname routing)."""

from civickey.api.site.routes import router as site_router

__all__ = ["site_router"]
