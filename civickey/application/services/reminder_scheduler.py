"""Collection reminder scheduling.

Trigger computation is pure (compute_weekly_trigger, compute_one_shot_trigger).
ReminderScheduler adds persistence: each logical reminder (collection type
id, or special_{id}) owns at most one scheduled notification, whose id is
kept in the key-value store so it can be cancelled after a restart.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any

from civickey.application.dtos.reminder import (
    OneShotTrigger,
    ReminderContent,
    ReminderPreferences,
    WeeklyTrigger,
)
from civickey.application.interfaces.services import IKeyValueStore, IReminderDelivery
from civickey.domain.entities.schedule import ScheduleEntity
from civickey.domain.exceptions import ValidationException
from civickey.shared.utils.datetime import utc_now
from civickey.shared.utils.i18n import localize

logger = logging.getLogger(__name__)

KEY_NOTIFICATION_PREFS = "@civickey_notification_prefs"
KEY_LANGUAGE = "@civickey_language"
KEY_NOTIFICATION_PREFIX = "@civickey_notif_"

DEFAULT_HOUR = 19
DEFAULT_MINUTE = 0

_STRINGS: dict[str, dict[str, Callable[..., str]]] = {
    "en": {
        "collection_title": lambda type_name: f"{type_name} tomorrow",
        "collection_body": lambda bin_name: f"Put out your {bin_name.lower()} tonight.",
        "special_title": lambda name: f"Special: {name} tomorrow",
        "special_body": lambda name, location: (
            f"Don't miss the {name.lower()} event at {location}."
            if location
            else f"Don't miss the {name.lower()} event tomorrow."
        ),
    },
    "fr": {
        "collection_title": lambda type_name: f"{type_name} demain",
        "collection_body": lambda bin_name: f"Sortez votre {bin_name.lower()} ce soir.",
        "special_title": lambda name: f"Spécial: {name} demain",
        "special_body": lambda name, location: (
            f"Ne manquez pas l'événement {name.lower()} à {location}."
            if location
            else f"Ne manquez pas l'événement {name.lower()} demain."
        ),
    },
}


def _check_time(hour: int, minute: int) -> None:
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        raise ValidationException("Reminder time must be HH 0-23 and MM 0-59", field="time")


def compute_weekly_trigger(
    day_of_week: int, hour: int = DEFAULT_HOUR, minute: int = DEFAULT_MINUTE
) -> WeeklyTrigger:
    """Weekly trigger on the evening before collection day (0=Sunday ... 6=Saturday)."""
    if not 0 <= day_of_week <= 6:
        raise ValidationException("dayOfWeek must be 0-6", field="dayOfWeek")
    _check_time(hour, minute)
    return WeeklyTrigger(weekday=(day_of_week - 1) % 7, hour=hour, minute=minute)


def compute_one_shot_trigger(
    date_iso: str,
    hour: int = DEFAULT_HOUR,
    minute: int = DEFAULT_MINUTE,
    *,
    now: datetime,
    tz: tzinfo,
) -> OneShotTrigger | None:
    """Trigger at (date - 1 day) hour:minute in tz, or None if not strictly after now."""
    _check_time(hour, minute)
    try:
        day = date.fromisoformat(str(date_iso)[:10])
    except ValueError as e:
        raise ValidationException(f"Invalid date: {date_iso!r}", field="date") from e
    notify_at = datetime.combine(day - timedelta(days=1), time(hour, minute), tzinfo=tz)
    if notify_at <= now:
        return None
    return OneShotTrigger(at=notify_at)


def notification_key(logical_key: str) -> str:
    return f"{KEY_NOTIFICATION_PREFIX}{logical_key}"


class ReminderScheduler:
    def __init__(
        self,
        store: IKeyValueStore,
        delivery: IReminderDelivery,
        tz: tzinfo,
        *,
        clock: Callable[[], datetime] = utc_now,
        default_locale: str = "en",
        default_hour: int = DEFAULT_HOUR,
        default_minute: int = DEFAULT_MINUTE,
    ) -> None:
        self.store = store
        self.delivery = delivery
        self.tz = tz
        self._clock = clock
        self.default_locale = default_locale
        self.default_hour = default_hour
        self.default_minute = default_minute

    async def get_preferences(self) -> ReminderPreferences:
        raw = await self.store.get_item(KEY_NOTIFICATION_PREFS)
        prefs: dict[str, Any] = {}
        if raw:
            try:
                prefs = json.loads(raw)
            except ValueError:
                logger.warning("Ignoring corrupt notification preferences")
        hour = prefs.get("hour")
        minute = prefs.get("minute")
        return ReminderPreferences(
            hour=self.default_hour if hour is None else int(hour),
            minute=self.default_minute if minute is None else int(minute),
            locale=await self.get_language(),
        )

    async def set_preferences(self, hour: int, minute: int) -> None:
        _check_time(hour, minute)
        await self.store.set_item(
            KEY_NOTIFICATION_PREFS, json.dumps({"hour": hour, "minute": minute})
        )

    async def get_language(self) -> str:
        language = await self.store.get_item(KEY_LANGUAGE)
        return language if language in _STRINGS else self.default_locale

    async def set_language(self, locale: str) -> None:
        if locale not in _STRINGS:
            raise ValidationException(f"Unsupported language: {locale!r}", field="locale")
        await self.store.set_item(KEY_LANGUAGE, locale)

    async def cancel(self, logical_key: str) -> None:
        """Cancel the stored notification for logical_key, if any."""
        key = notification_key(logical_key)
        stored = await self.store.get_item(key)
        if stored:
            await self.delivery.cancel(stored)
            await self.store.remove_item(key)

    async def cancel_all(self) -> int:
        """Cancel every stored reminder; return how many were cancelled."""
        keys = [
            k for k in await self.store.get_all_keys() if k.startswith(KEY_NOTIFICATION_PREFIX)
        ]
        for key in keys:
            stored = await self.store.get_item(key)
            if stored:
                await self.delivery.cancel(stored)
        if keys:
            await self.store.multi_remove(keys)
        return len(keys)

    async def _replace(
        self,
        logical_key: str,
        content: ReminderContent,
        trigger: WeeklyTrigger | OneShotTrigger,
    ) -> str:
        notification_id = await self.delivery.schedule(content, trigger)
        await self.store.set_item(notification_key(logical_key), notification_id)
        return notification_id

    async def schedule_collection_reminder(
        self, collection_type: dict[str, Any], day_of_week: int
    ) -> str:
        """Weekly reminder for one collection type; replaces any previous one."""
        type_id = collection_type["id"]
        await self.cancel(type_id)
        prefs = await self.get_preferences()
        strings = _STRINGS[prefs.locale]
        trigger = compute_weekly_trigger(day_of_week, prefs.hour, prefs.minute)
        type_name = localize(collection_type.get("name"), prefs.locale, type_id)
        bin_name = localize(collection_type.get("binName"), prefs.locale, type_name)
        content = ReminderContent(
            title=strings["collection_title"](type_name),
            body=strings["collection_body"](bin_name),
            data={"type": type_id, "dayOfWeek": day_of_week, "language": prefs.locale},
        )
        notification_id = await self._replace(type_id, content, trigger)
        logger.debug("Scheduled %s reminder for weekday %s", type_id, trigger.weekday)
        return notification_id

    async def schedule_special_collection_reminder(
        self, special: dict[str, Any]
    ) -> str | None:
        """One-shot reminder the evening before a special collection.

        Returns None (nothing scheduled) when that moment has already passed.
        """
        logical_key = f"special_{special['id']}"
        await self.cancel(logical_key)
        prefs = await self.get_preferences()
        trigger = compute_one_shot_trigger(
            special["date"], prefs.hour, prefs.minute, now=self._clock(), tz=self.tz
        )
        if trigger is None:
            return None
        strings = _STRINGS[prefs.locale]
        name = localize(special.get("name"), prefs.locale, str(special["id"]))
        location = localize(special.get("location"), prefs.locale) or None
        content = ReminderContent(
            title=strings["special_title"](name),
            body=strings["special_body"](name, location),
            data={"type": "special", "specialId": special["id"], "language": prefs.locale},
        )
        return await self._replace(logical_key, content, trigger)

    async def schedule_zone_reminders(
        self, schedule: ScheduleEntity, zone_id: str
    ) -> dict[str, str]:
        """Schedule a weekly reminder for every collection type of one zone."""
        scheduled: dict[str, str] = {}
        for type_id, entry in (schedule.zone_schedule(zone_id) or {}).items():
            collection_type = schedule.collection_type(type_id) or {"id": type_id}
            scheduled[type_id] = await self.schedule_collection_reminder(
                collection_type, int(entry["dayOfWeek"])
            )
        return scheduled
