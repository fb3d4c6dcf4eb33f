"""Cache key builders. Single place for key format.

Key components (hostname, municipality id, uid) must not contain
CACHE_KEY_SEP to avoid ambiguous or colliding keys.
"""

from civickey.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_DOMAIN,
    CACHE_PREFIX_MUNICIPALITY,
    CACHE_PREFIX_SESSION,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def domain_key(hostname: str) -> str:
    """Cache key for custom domain -> municipality id."""
    _validate_key_component(hostname, "hostname")
    return f"{CACHE_PREFIX_DOMAIN}{CACHE_KEY_SEP}{hostname}"


def municipality_config_key(municipality_id: str) -> str:
    """Cache key for a municipality's config document."""
    _validate_key_component(municipality_id, "municipality_id")
    return f"{CACHE_PREFIX_MUNICIPALITY}{CACHE_KEY_SEP}config{CACHE_KEY_SEP}{municipality_id}"


def municipality_pattern(municipality_id: str) -> str:
    """Pattern matching every cached entry for one municipality."""
    _validate_key_component(municipality_id, "municipality_id")
    return f"{CACHE_PREFIX_MUNICIPALITY}{CACHE_KEY_SEP}*{CACHE_KEY_SEP}{municipality_id}"


def active_municipalities_key() -> str:
    """Cache key for the sorted active-municipality listing."""
    return f"{CACHE_PREFIX_MUNICIPALITY}{CACHE_KEY_SEP}active"


def session_activity_key(uid: str, auth_time: int) -> str:
    """Cache key for an admin session's last activity (uid + token auth_time)."""
    _validate_key_component(uid, "uid")
    return f"{CACHE_PREFIX_SESSION}{CACHE_KEY_SEP}{uid}{CACHE_KEY_SEP}{auth_time}"
