"""Application DTOs (no dependency on the store or HTTP layer)."""
