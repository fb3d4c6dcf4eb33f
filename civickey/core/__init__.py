"""Core: configuration, application context, lifespan, error handlers, rate limits."""

from civickey.core.config import get_settings

__all__ = ["get_settings"]
