"""Repository protocols."""
