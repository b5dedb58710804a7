"""Domain layer: entities, validators and services."""
