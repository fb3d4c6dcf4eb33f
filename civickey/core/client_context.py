"""Client-side context: the offline data loader, reminders and the idle guard.

Mirrors AppContext for consumers of the public API (the mobile app or
any Python client). Components are built from the same Settings; local
storage defaults to a JSON file at local_storage_path.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from zoneinfo import ZoneInfo

import httpx

from civickey.application.interfaces.services import IKeyValueStore, IReminderDelivery
from civickey.application.services.offline_cache import OfflineCache
from civickey.application.services.reminder_scheduler import ReminderScheduler
from civickey.application.services.session_guard import InactivityGuard
from civickey.application.use_cases.municipality_sync import MunicipalityDataLoader
from civickey.core.config import Settings
from civickey.infrastructure.external import HttpSnapshotFetcher, LoggingReminderDelivery
from civickey.infrastructure.storage import FileKeyValueStore


@dataclass
class ClientContext:
    settings: Settings
    store: IKeyValueStore
    fetcher: HttpSnapshotFetcher
    loader: MunicipalityDataLoader
    reminders: ReminderScheduler

    @classmethod
    def build(
        cls,
        settings: Settings,
        api_base_url: str,
        *,
        store: IKeyValueStore | None = None,
        delivery: IReminderDelivery | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "ClientContext":
        store = store if store is not None else FileKeyValueStore(settings.local_storage_path)
        fetcher = HttpSnapshotFetcher(api_base_url, http_client=http_client)
        cache = OfflineCache(
            store,
            version=settings.offline_cache_version,
            max_age=settings.offline_cache_max_age_seconds,
            waste_items_ttl=settings.waste_items_cache_ttl_seconds,
        )
        reminders = ReminderScheduler(
            store,
            delivery if delivery is not None else LoggingReminderDelivery(),
            ZoneInfo(settings.timezone),
            default_locale=settings.default_locale,
            default_hour=settings.reminder_default_hour,
            default_minute=settings.reminder_default_minute,
        )
        return cls(
            settings=settings,
            store=store,
            fetcher=fetcher,
            loader=MunicipalityDataLoader(store, fetcher, cache),
            reminders=reminders,
        )

    def session_guard(self, sign_out: Callable[[], Awaitable[None]]) -> InactivityGuard:
        """Idle guard for an admin console session; sign_out runs once on expiry."""
        return InactivityGuard(
            sign_out,
            timeout=self.settings.session_idle_timeout_seconds,
            throttle=self.settings.session_activity_throttle_seconds,
        )

    async def aclose(self) -> None:
        await self.loader.wait_background()
        await self.fetcher.aclose()
