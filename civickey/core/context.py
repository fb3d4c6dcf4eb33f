"""Application context: every long-lived collaborator, built once per process.

AppContext.build() runs in the ASGI lifespan and aclose() on shutdown.
Tests build their own context from fakes; nothing here is a module-level
singleton.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from civickey.application.interfaces.repositories import (
    IAdminRepository,
    IContentStore,
    IMunicipalityDirectory,
)
from civickey.application.interfaces.services import (
    ICacheService,
    IDomainRegistrar,
    IIdentityProvider,
)
from civickey.application.services.admin_session_service import AdminSessionService
from civickey.application.services.authorization_service import AuthorizationService
from civickey.application.services.domain_resolver import DomainResolver
from civickey.application.services.page_content_validator import PageContentValidator
from civickey.application.services.session_guard import SessionActivityTracker
from civickey.application.use_cases.content_management import ContentManagementService
from civickey.application.use_cases.municipality_admin import MunicipalityAdminService
from civickey.application.use_cases.municipality_content import MunicipalityContentService
from civickey.core.config import Settings
from civickey.domain.exceptions import StoreNotConfiguredException
from civickey.infrastructure.cache import CacheService, MemoryCache
from civickey.infrastructure.external.vercel_registrar import VercelDomainRegistrar
from civickey.infrastructure.firebase.client import (
    create_firestore_client,
    load_service_account,
)
from civickey.infrastructure.firebase.repositories import (
    FirestoreAdminRepository,
    FirestoreContentStore,
    FirestoreMunicipalityDirectory,
)
from civickey.infrastructure.firebase.services import FirebaseIdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Composed collaborators for one running application.

    Store-backed members are None when no Firestore credentials are
    configured; the require_* accessors turn that into a 503.
    """

    settings: Settings
    cache: ICacheService
    domain_cache: ICacheService
    resolver: DomainResolver
    directory: IMunicipalityDirectory | None = None
    content: IContentStore | None = None
    admins: IAdminRepository | None = None
    identity: IIdentityProvider | None = None
    registrar: IDomainRegistrar | None = None
    authz: AuthorizationService = field(default_factory=AuthorizationService)
    page_validator: PageContentValidator = field(default_factory=PageContentValidator)
    _closeables: list[Any] = field(default_factory=list, repr=False)

    @classmethod
    def from_components(
        cls,
        settings: Settings,
        *,
        directory: IMunicipalityDirectory | None = None,
        content: IContentStore | None = None,
        admins: IAdminRepository | None = None,
        identity: IIdentityProvider | None = None,
        registrar: IDomainRegistrar | None = None,
        cache: ICacheService | None = None,
        domain_cache: ICacheService | None = None,
    ) -> "AppContext":
        """Wire a context from ready-made components (used by build() and tests)."""
        domain_cache = domain_cache or MemoryCache(
            max_entries=settings.domain_cache_max_entries,
            default_ttl=settings.domain_cache_ttl_seconds,
        )
        resolver = DomainResolver(
            directory,
            domain_cache,
            base_domain=settings.base_domain,
            dev_hosts=settings.dev_host_set,
            ttl_seconds=settings.domain_cache_ttl_seconds,
            negative_ttl_seconds=settings.domain_negative_cache_ttl_seconds,
            default_locale=settings.default_locale,
        )
        return cls(
            settings=settings,
            cache=cache or MemoryCache(),
            domain_cache=domain_cache,
            resolver=resolver,
            directory=directory,
            content=content,
            admins=admins,
            identity=identity,
            registrar=registrar,
        )

    @classmethod
    async def build(
        cls, settings: Settings, *, http_client: httpx.AsyncClient | None = None
    ) -> "AppContext":
        """Create clients from settings. Missing optional services are logged, not fatal."""
        cache: ICacheService
        redis_cache: CacheService | None = None
        if settings.redis_enabled:
            redis_cache = CacheService(settings)
            await redis_cache.connect()
        if redis_cache is not None and redis_cache.is_available():
            cache = redis_cache
        else:
            logger.info("Redis unavailable; using in-process cache")
            cache = MemoryCache()

        directory = content = admins = None
        identity = None
        firestore = create_firestore_client(settings, http_client=http_client)
        if firestore is not None:
            directory = FirestoreMunicipalityDirectory(firestore)
            content = FirestoreContentStore(firestore)
            admins = FirestoreAdminRepository(firestore)
            identity = FirebaseIdentityProvider(
                firestore.project_id,
                (
                    settings.firebase_web_api_key.get_secret_value()
                    if settings.firebase_web_api_key
                    else None
                ),
                load_service_account(settings),
                http_client=http_client,
            )

        registrar = None
        if settings.vercel_api_token and settings.vercel_project_id:
            registrar = VercelDomainRegistrar(
                settings.vercel_api_token.get_secret_value(),
                settings.vercel_project_id,
                cname_target=settings.domain_cname_target,
                dns_resolver_url=settings.dns_resolver_url,
                http_client=http_client,
            )
        else:
            logger.info("Vercel API not configured; custom domains are not registered")

        ctx = cls.from_components(
            settings,
            directory=directory,
            content=content,
            admins=admins,
            identity=identity,
            registrar=registrar,
            cache=cache,
        )
        ctx._closeables = [c for c in (firestore, identity, registrar) if c is not None]
        if redis_cache is not None:
            ctx._closeables.append(redis_cache)
        return ctx

    async def aclose(self) -> None:
        """Close HTTP clients and the Redis connection (reverse creation order)."""
        for resource in reversed(self._closeables):
            try:
                if isinstance(resource, CacheService):
                    await resource.disconnect()
                else:
                    await resource.aclose()
            except Exception:
                logger.exception("Error closing %s", type(resource).__name__)
        self._closeables = []

    # Store-backed services

    def require_store(self) -> tuple[IMunicipalityDirectory, IContentStore]:
        if self.directory is None or self.content is None:
            raise StoreNotConfiguredException()
        return self.directory, self.content

    def content_service(self) -> MunicipalityContentService:
        directory, content = self.require_store()
        return MunicipalityContentService(
            directory,
            content,
            self.cache,
            tz_name=self.settings.timezone,
            config_ttl=self.settings.cache_ttl_municipality_config,
            events_limit=self.settings.snapshot_events_limit,
        )

    def management_service(self) -> ContentManagementService:
        directory, content = self.require_store()
        return ContentManagementService(
            content,
            directory,
            self.cache,
            authz=self.authz,
            page_validator=self.page_validator,
            registrar=self.registrar,
            resolver=self.resolver,
        )

    def municipality_admin_service(self) -> MunicipalityAdminService:
        directory, content = self.require_store()
        if self.admins is None or self.identity is None:
            raise StoreNotConfiguredException()
        return MunicipalityAdminService(
            directory, content, self.admins, self.identity, self.cache, authz=self.authz
        )

    def session_service(self) -> AdminSessionService:
        directory, _ = self.require_store()
        if self.admins is None or self.identity is None:
            raise StoreNotConfiguredException()
        tracker = SessionActivityTracker(
            self.cache, timeout=self.settings.session_idle_timeout_seconds
        )
        return AdminSessionService(self.identity, self.admins, directory, tracker)
