"""Domain layer - entities, lifecycle rules and store contracts."""
