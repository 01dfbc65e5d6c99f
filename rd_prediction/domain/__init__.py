"""Domain layer: entities, enums, exceptions and repository interfaces."""
