"""Application layer: services, use cases, DTOs and ports."""
