"""DTOs for reminder scheduling (trigger descriptors and notification content)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class WeeklyTrigger:
    """Repeats every week on weekday (0=Sunday ... 6=Saturday) at hour:minute local time."""

    weekday: int
    hour: int
    minute: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "weekly",
            "weekday": self.weekday,
            "hour": self.hour,
            "minute": self.minute,
        }


@dataclass(frozen=True)
class OneShotTrigger:
    """Fires once at the given aware instant."""

    at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {"type": "date", "date": self.at.isoformat()}


@dataclass(frozen=True)
class ReminderContent:
    title: str
    body: str
    data: dict[str, Any]


@dataclass(frozen=True)
class ReminderPreferences:
    """User's notification time and language (persisted in the key-value store)."""

    hour: int = 19
    minute: int = 0
    locale: str = "fr"
