"""Application lifespan: startup and shutdown.

Builds the AppContext (store client, caches, resolver, identity provider,
domain registrar) on startup and closes it on shutdown. No business
logic here, only wiring.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from civickey.core.config import get_settings
from civickey.core.context import AppContext

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    A context already placed on app.state (tests) is used as-is and is
    not closed here.
    """
    settings = get_settings()

    # ---- Startup ----
    owned = getattr(app.state, "context", None) is None
    if owned:
        app.state.context = await AppContext.build(settings)
        ctx = app.state.context
        if ctx.directory is None:
            logger.warning("Firestore not configured; store-backed endpoints answer 503")
        logger.info("Application context ready (base domain %s)", settings.base_domain)

    yield

    # ---- Shutdown ----
    if owned and getattr(app.state, "context", None) is not None:
        await app.state.context.aclose()
        app.state.context = None
        logger.info("Application context closed")
