"""Custom-domain registration on Vercel plus DNS-over-HTTPS verification (implements IDomainRegistrar)."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from civickey.domain.exceptions import DomainRegistrationException

logger = logging.getLogger(__name__)

_VERCEL_API = "https://api.vercel.com"
_DNS_TYPE_CNAME = 5


def _provider_error(resp: httpx.Response, default: str) -> str:
    try:
        return resp.json().get("error", {}).get("message") or default
    except (ValueError, AttributeError):
        return default


class VercelDomainRegistrar:
    def __init__(
        self,
        api_token: str,
        project_id: str,
        *,
        cname_target: str = "cname.vercel-dns.com",
        dns_resolver_url: str = "https://dns.google/resolve",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._headers = {"Authorization": f"Bearer {api_token}"}
        self.project_id = project_id
        self.cname_target = cname_target.rstrip(".").lower()
        self.dns_resolver_url = dns_resolver_url
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=15.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def add_domain(self, domain: str) -> dict[str, Any]:
        resp = await self._http.post(
            f"{_VERCEL_API}/v10/projects/{self.project_id}/domains",
            headers=self._headers,
            json={"name": domain},
        )
        if resp.status_code >= 400:
            message = _provider_error(resp, "Failed to add domain")
            logger.warning("Vercel add %s failed: %d %s", domain, resp.status_code, message)
            raise DomainRegistrationException(domain, message, resp.status_code)
        logger.info("Domain added to hosting project: %s", domain)
        return {"success": True, "domain": resp.json()}

    async def remove_domain(self, domain: str) -> dict[str, Any]:
        resp = await self._http.delete(
            f"{_VERCEL_API}/v9/projects/{self.project_id}/domains/{quote(domain, safe='')}",
            headers=self._headers,
        )
        if resp.status_code >= 400:
            message = _provider_error(resp, "Failed to remove domain")
            logger.warning("Vercel remove %s failed: %d %s", domain, resp.status_code, message)
            raise DomainRegistrationException(domain, message, resp.status_code)
        logger.info("Domain removed from hosting project: %s", domain)
        return {"success": True}

    async def verify_domain(self, domain: str) -> dict[str, Any]:
        """verified is True iff a CNAME answer points at the configured target."""
        resp = await self._http.get(
            self.dns_resolver_url, params={"name": domain, "type": "CNAME"}
        )
        resp.raise_for_status()
        answers = resp.json().get("Answer") or []
        records = [
            {"type": "CNAME", "name": str(a.get("name") or domain), "value": str(a.get("data") or "")}
            for a in answers
            if a.get("type") == _DNS_TYPE_CNAME
        ]
        verified = any(self.cname_target in r["value"].lower() for r in records)
        return {"domain": domain, "verified": verified, "records": records}
