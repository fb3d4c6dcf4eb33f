"""Firestore-backed repository implementations."""

from civickey.infrastructure.firebase.repositories.admin_repo_firestore import (
    FirestoreAdminRepository,
)
from civickey.infrastructure.firebase.repositories.content_repo_firestore import (
    FirestoreContentStore,
)
from civickey.infrastructure.firebase.repositories.municipality_repo_firestore import (
    FirestoreMunicipalityDirectory,
)

__all__ = [
    "FirestoreAdminRepository",
    "FirestoreContentStore",
    "FirestoreMunicipalityDirectory",
]
