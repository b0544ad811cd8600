"""Domain layer: layout models and the services selecting and printing classes."""
