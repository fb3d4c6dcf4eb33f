"""Firestore client factory (REST-based, no firebase-admin).

Built once at app startup (see civickey.core.context) using either
FIREBASE_SERVICE_ACCOUNT_KEY (JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH
(file path). The returned client is owned by the application context; there
is no module-level client.
"""

import json
import logging
from pathlib import Path

import httpx

from civickey.core.config import Settings
from civickey.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)

logger = logging.getLogger(__name__)


def load_service_account(settings: Settings) -> dict | None:
    """Return service account dict from env key or file path."""
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def create_firestore_client(
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> FirestoreRESTClient | None:
    """Build the Firestore client, or None when no credentials are configured.

    On invalid/malformed credentials the error is logged and None is
    returned so the app can start without the store (store-backed
    endpoints then answer 503).
    """
    try:
        key_dict = load_service_account(settings)
        if not key_dict:
            logger.info("Firestore not configured; store-backed endpoints disabled")
            return None

        project_id = key_dict.get("project_id")
        if not project_id:
            logger.error("Firebase service account JSON missing 'project_id'")
            return None

        cred = _get_credentials(key_dict)
        logger.info("Firestore client initialized for project %s", project_id)
        return FirestoreRESTClient(project_id, cred, http_client=http_client)
    except Exception:
        logger.exception("Firebase initialization failed")
        return None
