"""Hostname -> municipality resolution for the public website.

Three cases, checked in order:

1. {municipality}.{base_domain}: the first label is the municipality id,
   no store lookup.
2. Development hosts (localhost, 127.0.0.1): the first path segment is the
   municipality id; a missing locale segment produces a redirect.
3. Anything else is a custom domain, looked up in the tenant directory by
   website.customDomain and cached for a fixed TTL.

Lookup errors are logged and treated as "no tenant": resolution never
fails a request.
"""

from __future__ import annotations

import logging
import re

from civickey.application.dtos.routing import RouteAction, RouteDecision
from civickey.application.interfaces.repositories import IMunicipalityDirectory
from civickey.application.interfaces.services import ICacheService
from civickey.application.services.locale_resolver import resolve_locale
from civickey.core.cache_keys import domain_key
from civickey.core.constants import SUPPORTED_LOCALES

logger = logging.getLogger(__name__)

_LOCALIZED_PATH_RE = re.compile(r"^/[^/]+/(fr|en)(?:/|$)")
_SKIPPED_PREFIXES = ("/_next", "/api")
_MISS = "__miss__"


def normalize_hostname(host: str | None) -> str:
    """Lower-case host header value without port or trailing dot."""
    if not host:
        return ""
    host = host.strip().lower()
    if host.startswith("["):
        # IPv6 literal: [::1]:8000
        return host.split("]", 1)[0] + "]"
    return host.split(":", 1)[0].rstrip(".")


class DomainResolver:
    """Resolves a request's hostname/path to a municipality id."""

    def __init__(
        self,
        directory: IMunicipalityDirectory | None,
        cache: ICacheService,
        *,
        base_domain: str,
        dev_hosts: frozenset[str],
        ttl_seconds: int = 300,
        negative_ttl_seconds: int = 0,
        default_locale: str = "fr",
    ) -> None:
        self.directory = directory
        self.cache = cache
        self.base_domain = base_domain.strip(".").lower()
        self.dev_hosts = dev_hosts
        self.ttl_seconds = ttl_seconds
        self.negative_ttl_seconds = negative_ttl_seconds
        self.default_locale = default_locale

    def subdomain_municipality(self, hostname: str) -> str | None:
        """First label before .{base_domain}, or None if hostname is not a subdomain."""
        suffix = f".{self.base_domain}"
        if not hostname.endswith(suffix):
            return None
        label = hostname[: -len(suffix)].split(".")[0]
        return label or None

    def is_dev_host(self, hostname: str) -> bool:
        return hostname in self.dev_hosts

    async def resolve(self, hostname: str, pathname: str = "/") -> str | None:
        """Return the municipality id for hostname/pathname, or None."""
        hostname = normalize_hostname(hostname)
        if not hostname:
            return None
        subdomain = self.subdomain_municipality(hostname)
        if subdomain is not None:
            return subdomain
        if hostname == self.base_domain or ":" in hostname:
            return None
        if self.is_dev_host(hostname):
            segments = [s for s in pathname.split("/") if s]
            return segments[0] if segments else None
        return await self.resolve_custom_domain(hostname)

    async def resolve_custom_domain(self, hostname: str) -> str | None:
        """Cached directory lookup by website.customDomain."""
        key = domain_key(hostname)
        cached = await self.cache.get(key)
        if cached == _MISS:
            return None
        if cached is not None:
            return cached
        if self.directory is None:
            return None
        try:
            municipality_id = await self.directory.find_by_custom_domain(hostname)
        except Exception:
            logger.exception("Custom domain resolution failed for %s", hostname)
            return None
        if municipality_id:
            await self.cache.set(key, municipality_id, ttl=self.ttl_seconds)
        elif self.negative_ttl_seconds > 0:
            await self.cache.set(key, _MISS, ttl=self.negative_ttl_seconds)
        else:
            logger.debug("No municipality for custom domain %s", hostname)
        return municipality_id

    async def evict(self, hostname: str | None) -> None:
        """Drop a cached custom-domain mapping (after a domain change)."""
        hostname = normalize_hostname(hostname)
        if hostname and ":" not in hostname:
            await self.cache.delete(domain_key(hostname))

    async def route(
        self,
        host: str | None,
        pathname: str,
        cookie_locale: str | None = None,
        accept_language: str | None = None,
    ) -> RouteDecision:
        """Decide whether to pass, rewrite to /{id}/{locale}{path}, or redirect."""
        if pathname.startswith(_SKIPPED_PREFIXES) or "." in pathname:
            return RouteDecision.passthrough()
        already = _LOCALIZED_PATH_RE.match(pathname)
        if already:
            segments = [s for s in pathname.split("/") if s]
            return RouteDecision.passthrough(segments[0], already.group(1))

        hostname = normalize_hostname(host)
        locale = resolve_locale(cookie_locale, accept_language, self.default_locale)

        if self.is_dev_host(hostname) and self.subdomain_municipality(hostname) is None:
            segments = [s for s in pathname.split("/") if s]
            if not segments:
                return RouteDecision.passthrough()
            municipality_id = segments[0]
            if len(segments) >= 2 and segments[1] in SUPPORTED_LOCALES:
                return RouteDecision.passthrough(municipality_id, segments[1])
            rest = "/".join(segments[1:])
            target = f"/{municipality_id}/{locale}" + (f"/{rest}" if rest else "")
            return RouteDecision(RouteAction.REDIRECT, municipality_id, locale, target)

        municipality_id = await self.resolve(hostname, pathname)
        if not municipality_id:
            return RouteDecision.passthrough()
        path = pathname if pathname != "/" else ""
        return RouteDecision(
            RouteAction.REWRITE,
            municipality_id,
            locale,
            f"/{municipality_id}/{locale}{path}",
        )
