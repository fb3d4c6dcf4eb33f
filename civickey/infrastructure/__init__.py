"""Infrastructure adapters (Firestore, Redis, local storage, external APIs)."""
