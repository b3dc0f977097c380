"""Domain layer: value objects, statistics, exceptions and collaborator protocols."""
