"""Domain layer — command identifiers, pipeline definitions, error kinds."""
