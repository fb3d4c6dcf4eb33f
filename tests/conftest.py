"""Pytest configuration and fixtures for civickey.

HTTP tests run the real app (civickey.main.create_app) through
httpx.ASGITransport with an AppContext built from the in-memory fakes
below, so no Firestore, Redis or identity service is needed.
"""

import copy
import itertools
import os
from datetime import date, datetime
from typing import Any

os.environ["REDIS_ENABLED"] = "false"
os.environ["BASE_DOMAIN"] = "civickey.ca"
os.environ["DOMAINS_API_SECRET"] = "test-domains-secret"
os.environ.pop("FIREBASE_SERVICE_ACCOUNT_KEY", None)
os.environ.pop("FIREBASE_SERVICE_ACCOUNT_PATH", None)

import pytest
from httpx import ASGITransport, AsyncClient

from civickey.application.dtos.identity import IdentityUser, TokenClaims
from civickey.application.services import identity_messages as msg
from civickey.core.config import get_settings
from civickey.core.context import AppContext
from civickey.core.limiter import limiter
from civickey.domain.entities.admin import AdminAccount
from civickey.domain.entities.content import alert_is_visible
from civickey.domain.exceptions import (
    AuthenticationException,
    IdentityException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    TenantNotFoundException,
)
from civickey.shared.utils.i18n import localize

get_settings.cache_clear()

DOMAINS_SECRET = "test-domains-secret"


def _name_key(doc: dict[str, Any]) -> str:
    return str(localize(doc.get("name"), "en") or doc.get("id") or "").casefold()


class InMemoryStore:
    """Tenant directory + content store over nested dicts.

    municipalities[id] is the config document; content[id][collection][doc_id]
    holds tenant documents; schedules[id] is data/schedule.
    """

    def __init__(self) -> None:
        self.municipalities: dict[str, dict[str, Any]] = {}
        self.content: dict[str, dict[str, dict[str, dict[str, Any]]]] = {}
        self.schedules: dict[str, dict[str, Any]] = {}
        self.queries: list[tuple[str, str]] = []
        self._ids = itertools.count(1)

    # Tenant directory

    async def get_config(self, municipality_id: str) -> dict[str, Any] | None:
        self.queries.append(("get_config", municipality_id))
        doc = self.municipalities.get(municipality_id)
        return {"id": municipality_id, **copy.deepcopy(doc)} if doc is not None else None

    async def list_active(self) -> list[dict[str, Any]]:
        return [
            {"id": mid, **copy.deepcopy(doc)}
            for mid, doc in self.municipalities.items()
            if doc.get("active") is True
        ]

    async def list_all(self) -> list[dict[str, Any]]:
        return [{"id": mid, **copy.deepcopy(doc)} for mid, doc in self.municipalities.items()]

    async def find_by_custom_domain(self, hostname: str) -> str | None:
        self.queries.append(("find_by_custom_domain", hostname))
        for mid, doc in self.municipalities.items():
            if (doc.get("website") or {}).get("customDomain") == hostname:
                return mid
        return None

    async def create(self, municipality_id: str, data: dict[str, Any]) -> None:
        if municipality_id in self.municipalities:
            raise ResourceAlreadyExistsException("Municipality", municipality_id)
        self.municipalities[municipality_id] = copy.deepcopy(data)

    async def update(self, municipality_id: str, data: dict[str, Any]) -> None:
        if municipality_id not in self.municipalities:
            raise TenantNotFoundException(municipality_id)
        self.municipalities[municipality_id].update(copy.deepcopy(data))

    # Content store

    def _coll(self, municipality_id: str, collection: str) -> dict[str, dict[str, Any]]:
        return self.content.setdefault(municipality_id, {}).setdefault(collection, {})

    def _docs(self, municipality_id: str, collection: str) -> list[dict[str, Any]]:
        return [
            {"id": doc_id, **copy.deepcopy(doc)}
            for doc_id, doc in self._coll(municipality_id, collection).items()
        ]

    async def get_zones(self, municipality_id: str) -> list[dict[str, Any]]:
        return sorted(self._docs(municipality_id, "zones"), key=_name_key)

    async def get_schedule(self, municipality_id: str) -> dict[str, Any] | None:
        doc = self.schedules.get(municipality_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def set_schedule(self, municipality_id: str, data: dict[str, Any]) -> None:
        self.schedules[municipality_id] = copy.deepcopy(data)

    async def get_upcoming_events(
        self, municipality_id: str, today: date, limit: int | None = None
    ) -> list[dict[str, Any]]:
        events = [
            e
            for e in await self.get_all_events(municipality_id)
            if str(e.get("date") or "") >= today.isoformat()
        ]
        return events[:limit] if limit else events

    async def get_all_events(self, municipality_id: str) -> list[dict[str, Any]]:
        return sorted(self._docs(municipality_id, "events"), key=lambda e: str(e.get("date")))

    async def get_active_alerts(
        self, municipality_id: str, today: date
    ) -> list[dict[str, Any]]:
        return [a for a in self._docs(municipality_id, "alerts") if alert_is_visible(a, today)]

    async def get_facilities(self, municipality_id: str) -> list[dict[str, Any]]:
        return sorted(self._docs(municipality_id, "facilities"), key=_name_key)

    async def get_road_closures(self, municipality_id: str) -> list[dict[str, Any]]:
        return sorted(
            self._docs(municipality_id, "roadClosures"),
            key=lambda c: str(c.get("startDate") or ""),
        )

    async def get_published_pages(self, municipality_id: str) -> list[dict[str, Any]]:
        return [p for p in await self.get_all_pages(municipality_id) if p.get("status") == "published"]

    async def get_all_pages(self, municipality_id: str) -> list[dict[str, Any]]:
        return sorted(self._docs(municipality_id, "pages"), key=lambda p: p.get("menuOrder") or 0)

    async def get_page_by_slug(
        self, municipality_id: str, slug: str, *, published_only: bool = True
    ) -> dict[str, Any] | None:
        page = await self.get_document(municipality_id, "pages", slug)
        if page is None or (published_only and page.get("status") != "published"):
            return None
        return page

    async def get_waste_items(self, municipality_id: str) -> list[dict[str, Any]]:
        return self._docs(municipality_id, "wasteItems")

    async def list_documents(
        self, municipality_id: str, collection: str, order_by: str | None = None
    ) -> list[dict[str, Any]]:
        docs = self._docs(municipality_id, collection)
        if order_by:
            docs.sort(key=lambda d: str(d.get(order_by) or ""))
        return docs

    async def get_document(
        self, municipality_id: str, collection: str, doc_id: str
    ) -> dict[str, Any] | None:
        doc = self._coll(municipality_id, collection).get(doc_id)
        return {"id": doc_id, **copy.deepcopy(doc)} if doc is not None else None

    async def create_document(
        self,
        municipality_id: str,
        collection: str,
        data: dict[str, Any],
        doc_id: str | None = None,
    ) -> str:
        coll = self._coll(municipality_id, collection)
        if doc_id is None:
            doc_id = f"doc{next(self._ids)}"
        elif doc_id in coll:
            raise ResourceAlreadyExistsException(collection, doc_id)
        coll[doc_id] = copy.deepcopy(data)
        return doc_id

    async def update_document(
        self, municipality_id: str, collection: str, doc_id: str, data: dict[str, Any]
    ) -> None:
        coll = self._coll(municipality_id, collection)
        if doc_id not in coll:
            raise ResourceNotFoundException(collection, doc_id)
        coll[doc_id].update(copy.deepcopy(data))

    async def delete_document(
        self, municipality_id: str, collection: str, doc_id: str
    ) -> None:
        self._coll(municipality_id, collection).pop(doc_id, None)


class InMemoryAdminRepository:
    def __init__(self) -> None:
        self.admins: dict[str, dict[str, Any]] = {}

    async def get_document(self, uid: str) -> dict[str, Any] | None:
        doc = self.admins.get(uid)
        return {"id": uid, **copy.deepcopy(doc)} if doc is not None else None

    async def get(self, uid: str) -> AdminAccount | None:
        doc = self.admins.get(uid)
        return AdminAccount.from_document(uid, doc) if doc is not None else None

    async def list(self, municipality_id: str | None = None) -> list[dict[str, Any]]:
        return [
            {"id": uid, **copy.deepcopy(doc)}
            for uid, doc in self.admins.items()
            if municipality_id is None or doc.get("municipalityId") == municipality_id
        ]

    async def create(self, uid: str, data: dict[str, Any]) -> None:
        self.admins[uid] = copy.deepcopy(data)

    async def update(self, uid: str, data: dict[str, Any]) -> None:
        if uid not in self.admins:
            raise ResourceNotFoundException("Admin", uid)
        self.admins[uid].update(copy.deepcopy(data))

    async def touch_last_login(self, uid: str, when: datetime) -> None:
        if uid in self.admins:
            self.admins[uid]["lastLogin"] = when


class FakeIdentityProvider:
    """Accounts keyed by email; bearer tokens are 'token-<uid>'."""

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, str]] = {}
        self.signed_out: list[str] = []
        self.reset_emails: list[str] = []
        self.auth_time = 1_700_000_000
        self._uids = itertools.count(1)

    def add_account(self, email: str, password: str, uid: str) -> None:
        self.accounts[email] = (uid, password)

    async def sign_in(self, email: str, password: str) -> IdentityUser:
        account = self.accounts.get(email)
        if account is None:
            raise IdentityException(msg.sign_in_message(msg.REASON_USER_NOT_FOUND), msg.REASON_USER_NOT_FOUND)
        uid, expected = account
        if password != expected:
            raise IdentityException(msg.sign_in_message(msg.REASON_WRONG_PASSWORD), msg.REASON_WRONG_PASSWORD)
        return IdentityUser(uid=uid, email=email, id_token=f"token-{uid}", refresh_token="refresh")

    async def verify_token(self, id_token: str) -> TokenClaims:
        if not id_token.startswith("token-"):
            raise AuthenticationException("Invalid or expired token")
        return TokenClaims(uid=id_token[len("token-"):], auth_time=self.auth_time)

    async def sign_out(self, uid: str) -> None:
        self.signed_out.append(uid)

    async def send_password_reset(self, email: str) -> None:
        if email not in self.accounts:
            raise IdentityException(
                msg.password_reset_message(msg.REASON_USER_NOT_FOUND), msg.REASON_USER_NOT_FOUND
            )
        self.reset_emails.append(email)

    async def create_account(self, email: str, display_name: str = "") -> str:
        uid = f"new{next(self._uids)}"
        self.accounts[email] = (uid, "")
        return uid


class FakeDomainRegistrar:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    async def add_domain(self, domain: str) -> dict[str, Any]:
        self.calls.append(("add", domain))
        if self.fail_with is not None:
            raise self.fail_with
        return {"name": domain}

    async def remove_domain(self, domain: str) -> dict[str, Any]:
        self.calls.append(("remove", domain))
        if self.fail_with is not None:
            raise self.fail_with
        return {}

    async def verify_domain(self, domain: str) -> dict[str, Any]:
        self.calls.append(("verify", domain))
        return {"domain": domain, "verified": True, "records": []}


def seed_saint_lazare(store: InMemoryStore) -> None:
    """Two zones; east collects recycling on Tuesdays."""
    store.municipalities["saint-lazare"] = {
        "name": {"en": "Saint-Lazare", "fr": "Saint-Lazare"},
        "nameEn": "Saint-Lazare",
        "nameFr": "Saint-Lazare",
        "province": "QC",
        "active": True,
        "colors": {"primary": "#0D5C63", "secondary": "#E07A5F"},
        "website": {"enabled": True, "customDomain": "www.saint-lazare.ca"},
    }
    zones = store._coll("saint-lazare", "zones")
    zones["east"] = {"name": {"en": "East", "fr": "Est"}}
    zones["west"] = {"name": {"en": "West", "fr": "Ouest"}}
    store.schedules["saint-lazare"] = {
        "collectionTypes": [{"id": "recycling", "name": {"en": "Recycling", "fr": "Recyclage"}}],
        "schedules": {
            "east": {"recycling": {"dayOfWeek": 2, "frequency": "weekly"}},
            "west": {"recycling": {"dayOfWeek": 4, "frequency": "biweekly"}},
        },
        "guidelines": {},
        "specialCollections": [],
    }
    store._coll("saint-lazare", "events")["e1"] = {
        "title": {"en": "Fair", "fr": "Foire"},
        "date": "2099-06-01",
    }
    store._coll("saint-lazare", "alerts")["a1"] = {
        "title": {"en": "Water main", "fr": "Aqueduc"},
        "active": True,
    }
    store._coll("saint-lazare", "wasteItems")["w1"] = {
        "nameFr": "Papier",
        "nameEn": "Paper",
        "searchTerms": ["papier", "paper", "recyclage"],
    }
    store.municipalities["hudson"] = {
        "name": "Hudson",
        "active": False,
    }


@pytest.fixture
def settings():
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    seed_saint_lazare(s)
    return s


@pytest.fixture
def admin_repo() -> InMemoryAdminRepository:
    repo = InMemoryAdminRepository()
    repo.admins["root"] = {"email": "root@civickey.ca", "role": "super-admin", "active": True}
    repo.admins["ed"] = {
        "email": "ed@saint-lazare.ca",
        "role": "editor",
        "municipalityId": "saint-lazare",
        "active": True,
    }
    repo.admins["boss"] = {
        "email": "boss@saint-lazare.ca",
        "role": "admin",
        "municipalityId": "saint-lazare",
        "active": True,
    }
    repo.admins["gone"] = {
        "email": "gone@saint-lazare.ca",
        "role": "editor",
        "municipalityId": "saint-lazare",
        "active": False,
    }
    return repo


@pytest.fixture
def identity() -> FakeIdentityProvider:
    provider = FakeIdentityProvider()
    provider.add_account("root@civickey.ca", "pw-root", "root")
    provider.add_account("ed@saint-lazare.ca", "pw-ed", "ed")
    provider.add_account("boss@saint-lazare.ca", "pw-boss", "boss")
    provider.add_account("gone@saint-lazare.ca", "pw-gone", "gone")
    provider.add_account("stranger@example.com", "pw-x", "stranger")
    return provider


@pytest.fixture
def registrar() -> FakeDomainRegistrar:
    return FakeDomainRegistrar()


@pytest.fixture
def context(settings, store, admin_repo, identity, registrar) -> AppContext:
    return AppContext.from_components(
        settings,
        directory=store,
        content=store,
        admins=admin_repo,
        identity=identity,
        registrar=registrar,
    )


@pytest.fixture
def app(context):
    from civickey.main import create_app

    application = create_app()
    application.state.context = context
    return application


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), rate limits off."""
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://localhost") as ac:
        yield ac
    limiter.enabled = True
