"""Firebase-backed services."""

from civickey.infrastructure.firebase.services.identity_firebase import (
    FirebaseIdentityProvider,
)

__all__ = ["FirebaseIdentityProvider"]
