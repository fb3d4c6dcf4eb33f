"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from civickey.api.v1.dependencies.
"""

from fastapi import APIRouter

from civickey.api.v1.endpoints import (
    admin_content,
    admin_super,
    auth,
    domains,
    health,
    municipalities,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(
    municipalities.router, prefix="/municipalities", tags=["municipalities"]
)
api_router.include_router(admin_content.router, prefix="/admin", tags=["admin-content"])
api_router.include_router(admin_super.router, prefix="/admin", tags=["super-admin"])
api_router.include_router(domains.router, prefix="/domains", tags=["domains"])

__all__ = ["api_router"]
