"""Response-language selection: cookie, then Accept-Language, then default."""

from civickey.core.constants import SUPPORTED_LOCALES


def is_supported_locale(value: str | None) -> bool:
    return value in SUPPORTED_LOCALES


def resolve_locale(
    cookie_locale: str | None,
    accept_language: str | None,
    default: str = "fr",
) -> str:
    """Return 'en' or 'fr'.

    An explicit cookie of exactly 'en' or 'fr' wins; otherwise 'en' when the
    Accept-Language primary tag starts with 'en'; otherwise default.
    """
    if is_supported_locale(cookie_locale):
        return cookie_locale
    if accept_language:
        primary = accept_language.split(",")[0].strip().lower()
        if primary.startswith("en"):
            return "en"
    return default
