"""dropctl — build orchestration CLI for Drupal projects."""

__version__ = "0.1.0"
