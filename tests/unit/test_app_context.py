"""Unit tests for AppContext wiring and the application lifespan."""

import pytest
from fastapi import FastAPI
from pydantic import SecretStr

from civickey.core.context import AppContext
from civickey.core.lifespan import create_lifespan
from civickey.domain.exceptions import StoreNotConfiguredException
from civickey.infrastructure.cache import MemoryCache
from civickey.infrastructure.external import VercelDomainRegistrar


async def test_build_without_credentials_disables_store(settings) -> None:
    ctx = await AppContext.build(settings)
    try:
        assert ctx.directory is None
        assert ctx.identity is None
        assert isinstance(ctx.cache, MemoryCache)
        with pytest.raises(StoreNotConfiguredException):
            ctx.content_service()
        with pytest.raises(StoreNotConfiguredException):
            ctx.session_service()
    finally:
        await ctx.aclose()


async def test_build_with_vercel_settings_creates_registrar(settings) -> None:
    configured = settings.model_copy(
        update={"vercel_api_token": SecretStr("tok"), "vercel_project_id": "prj_1"}
    )
    ctx = await AppContext.build(configured)
    try:
        assert isinstance(ctx.registrar, VercelDomainRegistrar)
        assert ctx.registrar.project_id == "prj_1"
    finally:
        await ctx.aclose()


def test_from_components_shares_domain_cache_with_resolver(settings, store) -> None:
    ctx = AppContext.from_components(settings, directory=store, content=store)
    assert ctx.resolver.cache is ctx.domain_cache
    assert ctx.resolver.base_domain == "civickey.ca"
    assert ctx.content_service() is not ctx.content_service()


async def test_lifespan_builds_and_closes_context() -> None:
    app = FastAPI()
    async with create_lifespan(app):
        assert isinstance(app.state.context, AppContext)
    assert app.state.context is None


async def test_lifespan_keeps_injected_context(context) -> None:
    app = FastAPI()
    app.state.context = context
    async with create_lifespan(app):
        assert app.state.context is context
    assert app.state.context is context
