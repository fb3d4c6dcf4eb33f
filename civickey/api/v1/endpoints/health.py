"""Health check endpoints. Liveness has no dependencies; readiness reports the store and cache."""

from fastapi import APIRouter

from civickey.api.v1.dependencies import ContextDep
from civickey.infrastructure.cache import CacheService
from civickey.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get("/ready", response_model=ReadinessResponse)
def readiness_check(ctx: ContextDep) -> ReadinessResponse:
    """Report whether the document store is configured and which cache is in use.

    The service stays up without a store; store-backed routes answer 503.
    """
    cache = "redis" if isinstance(ctx.cache, CacheService) else "memory"
    return ReadinessResponse(store=ctx.directory is not None, cache=cache)
