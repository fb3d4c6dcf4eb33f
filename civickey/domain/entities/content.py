"""Visibility rules for tenant-scoped content (alerts, events, zones)."""

from datetime import date
from typing import Any


def _iso_day(value: Any) -> str | None:
    if not value:
        return None
    return str(value)[:10]


def alert_is_visible(alert: dict[str, Any], today: date) -> bool:
    """An alert is visible when active and today is within [startDate, endDate].

    Either bound may be absent (open-ended).
    """
    if alert.get("active") is not True:
        return False
    today_iso = today.isoformat()
    start = _iso_day(alert.get("startDate"))
    end = _iso_day(alert.get("endDate"))
    if start and start > today_iso:
        return False
    if end and end < today_iso:
        return False
    return True


def auto_selected_zone(zones: list[dict[str, Any]]) -> str | None:
    """Return the only zone's id when a municipality has exactly one zone."""
    if len(zones) == 1:
        return zones[0].get("id")
    return None
