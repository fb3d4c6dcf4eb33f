"""Core constants: cache key prefixes, locales and seed data for new municipalities."""

# Cache key prefixes
CACHE_PREFIX_DOMAIN = "domain"
CACHE_PREFIX_MUNICIPALITY = "municipality"
CACHE_PREFIX_SESSION = "session"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

SUPPORTED_LOCALES = ("en", "fr")

# Built-in website sections; custom pages may not claim these slugs.
RESERVED_PAGE_SLUGS = frozenset({"collections", "events", "news", "facilities"})

DEFAULT_PROVINCE = "QC"

DEFAULT_COLORS = {
    "primary": "#0D5C63",
    "secondary": "#E07A5F",
    "background": "#F5F0E8",
}

DEFAULT_COLLECTION_TYPES = [
    {
        "id": "recycling",
        "name": {"en": "Recycling", "fr": "Recyclage"},
        "binName": {"en": "Blue Bin", "fr": "Bac bleu"},
        "color": "#2E86AB",
    },
    {
        "id": "compost",
        "name": {"en": "Compost", "fr": "Compost"},
        "binName": {"en": "Brown Bin", "fr": "Bac brun"},
        "color": "#8B5A2B",
    },
    {
        "id": "garbage",
        "name": {"en": "Garbage", "fr": "Ordures"},
        "binName": {"en": "Black Bin", "fr": "Bac noir"},
        "color": "#4A4A4A",
    },
]

DEFAULT_GUIDELINES = {
    "timing": {
        "en": "Put out by 7:00 AM on collection day.",
        "fr": "Sortir avant 7h00 le jour de collecte.",
    },
    "position": {
        "en": ["Cover closed", "Handle facing your home"],
        "fr": ["Couvercle fermé", "Poignée face à votre maison"],
    },
}

# RBAC feature -> tenant collection for the plain CRUD content types.
CONTENT_COLLECTIONS = {
    "events": "events",
    "announcements": "alerts",
    "facilities": "facilities",
    "roadClosures": "roadClosures",
    "wasteItems": "wasteItems",
}
