"""Domain layer: entities, business rules and services."""
