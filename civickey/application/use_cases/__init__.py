"""Application use cases (public reads, admin content, super-admin, client sync)."""
