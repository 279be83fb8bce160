"""Manual, step and image services."""
