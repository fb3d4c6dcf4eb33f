"""Adapters for external services (hosting provider, public API, notifications)."""

from civickey.infrastructure.external.api_client import HttpSnapshotFetcher
from civickey.infrastructure.external.reminder_delivery import LoggingReminderDelivery
from civickey.infrastructure.external.vercel_registrar import VercelDomainRegistrar

__all__ = ["HttpSnapshotFetcher", "LoggingReminderDelivery", "VercelDomainRegistrar"]
