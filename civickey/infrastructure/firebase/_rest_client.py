"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Supports the nested layout the tenant store needs: documents, sub-collections
(municipalities/{id}/events), structured queries with AND-ed filters, and
field-masked updates.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

import httpx

from civickey.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    document_id,
    encode_document,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_PAGE_SIZE = 300


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    params: list[tuple[str, str]] | None = None,
) -> dict | list | None:
    """Perform async HTTP request to Firestore REST API. 404 returns None."""
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method == "GET":
        resp = await client.get(url, headers=headers, params=params)
    elif method == "PATCH":
        resp = await client.patch(url, headers=headers, json=body, params=params)
    elif method == "POST":
        resp = await client.post(url, headers=headers, json=body, params=params)
    elif method == "DELETE":
        resp = await client.delete(url, headers=headers, params=params)
    else:
        raise ValueError(f"Unsupported method: {method!r}")
    if resp.status_code == 404:
        return None
    if resp.status_code == 409:
        raise DocumentExistsError("Document already exists")
    if resp.status_code not in (200, 204):
        resp.raise_for_status()
    if method == "DELETE":
        return {}
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


class DocumentExistsError(Exception):
    """Raised when createDocument returns 409 (document ID already exists)."""


class DocumentNotFoundError(Exception):
    """Raised when update() targets a document that does not exist."""


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.rsplit("/", 1)[-1]

    @property
    def path(self) -> str:
        return self._path

    def collection(self, collection_id: str) -> "CollectionReference":
        """Sub-collection under this document."""
        return CollectionReference(self._client, f"{self._path}/{collection_id}")

    async def set(self, data: dict[str, Any]) -> None:
        """Create or overwrite the document (PATCH with full replace)."""
        doc = encode_document(data)
        url = f"{_BASE}/{self._path}"
        await _request_async(
            self._client._http,
            url,
            method="PATCH",
            body=doc,
            access_token=await self._client.get_token(),
        )

    async def update(self, data: dict[str, Any]) -> None:
        """Update only the given top-level fields; the document must exist.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        doc = encode_document(data)
        url = f"{_BASE}/{self._path}"
        params = [("updateMask.fieldPaths", field) for field in data]
        params.append(("currentDocument.exists", "true"))
        out = await _request_async(
            self._client._http,
            url,
            method="PATCH",
            body=doc,
            access_token=await self._client.get_token(),
            params=params,
        )
        if out is None:
            raise DocumentNotFoundError(self._path)

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        url = f"{_BASE}/{self._path}"
        out = await _request_async(
            self._client._http, url, access_token=await self._client.get_token()
        )
        if not out:
            return None
        return DocumentSnapshot(self.id, decode_document(out))

    async def delete(self) -> None:
        """Delete the document. Idempotent if document is already missing (404)."""
        url = f"{_BASE}/{self._path}"
        await _request_async(
            self._client._http,
            url,
            method="DELETE",
            access_token=await self._client.get_token(),
        )


class DocumentSnapshot:
    """Snapshot of a document (id + data)."""

    def __init__(self, id_: str, data: dict):
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return self._data


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array_contains": "ARRAY_CONTAINS",
    "array-contains": "ARRAY_CONTAINS",
    "array_contains_any": "ARRAY_CONTAINS_ANY",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
}

_DIRECTION_MAP: dict[str, str] = {
    "asc": "ASCENDING",
    "desc": "DESCENDING",
    "ASCENDING": "ASCENDING",
    "DESCENDING": "DESCENDING",
}


class _Query:
    """Fluent query builder for collection; runs via runQuery (filter/order/offset/limit on server)."""

    def __init__(
        self,
        client: "FirestoreRESTClient",
        parent: str,
        collection_id: str,
    ):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[tuple[str, str, Any]] = []
        self._orders: list[tuple[str, str]] = []
        self._offset: int = 0
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> "_Query":
        """Add a field filter; multiple filters are AND-ed."""
        self._filters.append((field, _OP_MAP.get(op, op), value))
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> "_Query":
        self._orders.append((field, _DIRECTION_MAP.get(direction, direction)))
        return self

    def offset(self, n: int) -> "_Query":
        self._offset = n
        return self

    def limit(self, n: int) -> "_Query":
        self._limit = n
        return self

    def to_structured_query(self) -> dict[str, Any]:
        """Build the runQuery structuredQuery body."""
        structured: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
        }
        field_filters = [
            {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": op,
                    "value": _encode_value(value),
                }
            }
            for field, op, value in self._filters
        ]
        if len(field_filters) == 1:
            structured["where"] = field_filters[0]
        elif field_filters:
            structured["where"] = {
                "compositeFilter": {"op": "AND", "filters": field_filters}
            }
        if self._orders:
            structured["orderBy"] = [
                {"field": {"fieldPath": field}, "direction": direction}
                for field, direction in self._orders
            ]
        if self._offset:
            structured["offset"] = self._offset
        if self._limit:
            structured["limit"] = self._limit
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        url = f"{_BASE}/{self._parent}:runQuery"
        body = {"structuredQuery": self.to_structured_query()}
        resp = await _request_async(
            self._client._http,
            url,
            method="POST",
            body=body,
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            doc = item["document"]
            yield DocumentSnapshot(document_id(doc), decode_document(doc))


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path.rstrip("/")

    @property
    def path(self) -> str:
        return self._path

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document with the given ID (fail with DocumentExistsError if it exists)."""
        doc = encode_document(data)
        url = f"{_BASE}/{self._path}?documentId={quote(document_id, safe='')}"
        await _request_async(
            self._client._http,
            url,
            method="POST",
            body=doc,
            access_token=await self._client.get_token(),
        )

    async def add(self, data: dict[str, Any]) -> DocumentReference:
        """Create a document with a server-generated ID and return its reference."""
        doc = encode_document(data)
        url = f"{_BASE}/{self._path}"
        out = await _request_async(
            self._client._http,
            url,
            method="POST",
            body=doc,
            access_token=await self._client.get_token(),
        )
        return self.document(document_id(out or {}))

    def _query(self) -> _Query:
        parent, collection_id = self._path.rsplit("/", 1)
        return _Query(self._client, parent, collection_id)

    def where(self, field: str, op: str, value: Any) -> _Query:
        """Start a query with a filter. Use .where(), .order_by(), .offset(), .limit(), then .stream()."""
        return self._query().where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        return self._query().order_by(field, direction)

    def limit(self, n: int) -> _Query:
        return self._query().limit(n)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """List documents in the collection (shallow), following nextPageToken."""
        url = f"{_BASE}/{self._path}"
        page_token: str | None = None
        while True:
            params = [("pageSize", str(_PAGE_SIZE))]
            if page_token:
                params.append(("pageToken", page_token))
            out = await _request_async(
                self._client._http,
                url,
                access_token=await self._client.get_token(),
                params=params,
            )
            if not out:
                return
            for doc in out.get("documents", []):
                yield DocumentSnapshot(document_id(doc), decode_document(doc))
            page_token = out.get("nextPageToken")
            if not page_token:
                return


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    @property
    def project_id(self) -> str:
        return self._project_id

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str | None:
        """Return a valid access token; refreshes in thread pool to avoid blocking.

        None credentials (emulator or tests) send no Authorization header.
        """
        if self._credentials is None:
            return None
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")
