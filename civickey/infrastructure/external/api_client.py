"""HTTP client for the public API (implements ISnapshotFetcher for client-side consumers)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx


class HttpSnapshotFetcher:
    """Fetches snapshots and waste-item catalogs from a running CivicKey service."""

    def __init__(
        self,
        base_url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _url(self, municipality_id: str, suffix: str) -> str:
        return f"{self.base_url}/api/v1/municipalities/{quote(municipality_id, safe='')}/{suffix}"

    async def fetch_all(self, municipality_id: str) -> dict[str, Any]:
        resp = await self._http.get(self._url(municipality_id, "snapshot"))
        resp.raise_for_status()
        return resp.json()

    async def fetch_waste_items(self, municipality_id: str) -> list[dict[str, Any]]:
        resp = await self._http.get(self._url(municipality_id, "waste-items"))
        resp.raise_for_status()
        return resp.json()
