"""Firestore collection names and tenant paths (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when the first document is written. Every tenant-scoped collection lives
under municipalities/{municipality_id}, so the tenant id is part of every
document path.

Example:
    coll = tenant_collection(client, "saint-lazare", COLLECTION_EVENTS)
    async for snap in coll.order_by("date").stream():
        ...
"""

from civickey.core.tenant_validation import is_valid_municipality_id_format
from civickey.infrastructure.firebase._rest_client import (
    CollectionReference,
    DocumentReference,
    FirestoreRESTClient,
)

# Top-level
COLLECTION_MUNICIPALITIES = "municipalities"
COLLECTION_ADMINS = "admins"

# Under municipalities/{id}
COLLECTION_ZONES = "zones"
COLLECTION_DATA = "data"
COLLECTION_EVENTS = "events"
COLLECTION_ALERTS = "alerts"
COLLECTION_FACILITIES = "facilities"
COLLECTION_ROAD_CLOSURES = "roadClosures"
COLLECTION_PAGES = "pages"
COLLECTION_WASTE_ITEMS = "wasteItems"

TENANT_COLLECTIONS = frozenset(
    {
        COLLECTION_ZONES,
        COLLECTION_DATA,
        COLLECTION_EVENTS,
        COLLECTION_ALERTS,
        COLLECTION_FACILITIES,
        COLLECTION_ROAD_CLOSURES,
        COLLECTION_PAGES,
        COLLECTION_WASTE_ITEMS,
    }
)

# data/{...}
DOC_SCHEDULE = "schedule"


def _check_segment(value: str, name: str) -> None:
    if not is_valid_municipality_id_format(value):
        raise ValueError(f"Invalid {name} for document path: {value!r}")


def municipality_document(
    client: FirestoreRESTClient, municipality_id: str
) -> DocumentReference:
    """municipalities/{municipality_id}; rejects ids that could escape the tenant sub-tree."""
    _check_segment(municipality_id, "municipality_id")
    return client.collection(COLLECTION_MUNICIPALITIES).document(municipality_id)


def tenant_collection(
    client: FirestoreRESTClient, municipality_id: str, collection: str
) -> CollectionReference:
    """municipalities/{municipality_id}/{collection}."""
    if collection not in TENANT_COLLECTIONS:
        raise ValueError(f"Unknown tenant collection: {collection!r}")
    return municipality_document(client, municipality_id).collection(collection)


def tenant_document(
    client: FirestoreRESTClient, municipality_id: str, collection: str, doc_id: str
) -> DocumentReference:
    """municipalities/{municipality_id}/{collection}/{doc_id}."""
    _check_segment(doc_id, "document id")
    return tenant_collection(client, municipality_id, collection).document(doc_id)


def schedule_document(
    client: FirestoreRESTClient, municipality_id: str
) -> DocumentReference:
    return tenant_document(client, municipality_id, COLLECTION_DATA, DOC_SCHEDULE)
