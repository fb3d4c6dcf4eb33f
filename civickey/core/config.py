"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Invalid values (unknown default locale, empty base
domain, out-of-range reminder time) fail at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Firestore credentials are optional: without them the service starts
    and store-backed endpoints answer 503 (see StoreNotConfiguredException).
    """

    # App
    app_name: str = "civickey"
    app_version: str = "1.0.0"
    debug: bool = False

    # Tenant routing
    base_domain: str = "civickey.ca"
    dev_hosts: str = "localhost,127.0.0.1"
    default_locale: str = "fr"
    locale_cookie_name: str = "locale"
    timezone: str = "America/Toronto"
    domain_cache_ttl_seconds: int = 300  # 5 minutes
    domain_cache_max_entries: int = 1024
    # 0 disables negative caching: every miss re-queries the directory.
    domain_negative_cache_ttl_seconds: int = 0

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    # Web API key for Identity Toolkit (email/password sign-in, reset emails).
    firebase_web_api_key: SecretStr | None = None

    # Redis cache
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_ttl_municipality_config: int = 900

    # Admin sessions
    session_idle_timeout_seconds: int = 15 * 60
    session_activity_throttle_seconds: float = 1.0

    # Client-side caches
    offline_cache_max_age_seconds: int = 60 * 60
    offline_cache_version: int = 2
    waste_items_cache_ttl_seconds: int = 24 * 60 * 60
    snapshot_events_limit: int = 5
    local_storage_path: str = "~/.civickey/storage.json"

    # Reminders
    reminder_default_hour: int = 19
    reminder_default_minute: int = 0

    # Custom domains (hosting provider + DNS verification)
    vercel_api_token: SecretStr | None = None
    vercel_project_id: str | None = None
    domains_api_secret: SecretStr | None = None
    domain_cname_target: str = "cname.vercel-dns.com"
    dns_resolver_url: str = "https://dns.google/resolve"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Request
    request_id_header: str = "X-Request-ID"
    municipality_header_name: str = "X-Municipality-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_values(self) -> "Settings":
        """Reject settings the routing and reminder logic cannot work with."""
        if self.default_locale not in ("en", "fr"):
            raise ValueError(
                f"default_locale must be 'en' or 'fr', got: {self.default_locale!r}"
            )
        if not self.base_domain.strip().strip("."):
            raise ValueError("BASE_DOMAIN must not be empty")
        if not 0 <= self.reminder_default_hour <= 23:
            raise ValueError("reminder_default_hour must be between 0 and 23")
        if not 0 <= self.reminder_default_minute <= 59:
            raise ValueError("reminder_default_minute must be between 0 and 59")
        if self.domain_cache_ttl_seconds <= 0:
            raise ValueError("domain_cache_ttl_seconds must be positive")
        if self.domain_cache_max_entries <= 0:
            raise ValueError("domain_cache_max_entries must be positive")
        return self

    @property
    def dev_host_set(self) -> frozenset[str]:
        """Loopback/development hostnames (lower-case, no port)."""
        return frozenset(
            h.strip().lower() for h in self.dev_hosts.split(",") if h.strip()
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    In tests, call get_settings.cache_clear() after changing env vars so
    the next get_settings() uses the new values.
    """
    return Settings()
