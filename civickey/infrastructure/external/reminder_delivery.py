"""Reminder delivery that records scheduled notifications (implements IReminderDelivery).

Platform notification delivery is outside this service; this backend
keeps scheduled reminders in memory and logs them, which is what
headless clients and tests need.
"""

from __future__ import annotations

import logging
import uuid

from civickey.application.dtos.reminder import OneShotTrigger, ReminderContent, WeeklyTrigger

logger = logging.getLogger(__name__)


class LoggingReminderDelivery:
    def __init__(self) -> None:
        self.scheduled: dict[str, tuple[ReminderContent, WeeklyTrigger | OneShotTrigger]] = {}

    async def schedule(
        self, content: ReminderContent, trigger: WeeklyTrigger | OneShotTrigger
    ) -> str:
        notification_id = uuid.uuid4().hex
        self.scheduled[notification_id] = (content, trigger)
        logger.info("Reminder scheduled: %s %s (%s)", notification_id, content.title, trigger.to_dict())
        return notification_id

    async def cancel(self, notification_id: str) -> None:
        if self.scheduled.pop(notification_id, None) is not None:
            logger.debug("Reminder cancelled: %s", notification_id)
