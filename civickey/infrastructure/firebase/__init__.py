"""Firestore (REST) and Firebase Authentication integration."""

from civickey.infrastructure.firebase.client import (
    create_firestore_client,
    load_service_account,
)

__all__ = [
    "create_firestore_client",
    "load_service_account",
]
