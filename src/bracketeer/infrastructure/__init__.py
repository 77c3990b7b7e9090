"""Infrastructure layer: configuration files and tournament storage."""
