"""Domain layer: entities, value objects, enums and exceptions (no infrastructure imports)."""
