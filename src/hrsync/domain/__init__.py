"""Domain layer: canonical employee model, diffing and reconciliation services."""
